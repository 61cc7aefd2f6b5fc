from django.contrib import admin

from .models import CustomUser


# CUSTOM USER Admin ---------------------------------------------
@admin.register(CustomUser)
class CustomUserAdmin(admin.ModelAdmin):
    list_display = ['email', 'full_name', 'job', 'university_name', 'last_active', 'is_active']
    search_fields = ['email', 'full_name']
    list_filter = ['is_active', 'is_staff']
    readonly_fields = ['last_active', 'date_joined']
    ordering = ['-date_joined']
