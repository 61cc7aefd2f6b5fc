from django.contrib import admin

from .models import Group, GroupMembership, GroupMessage


class GroupMembershipInline(admin.TabularInline):
    model = GroupMembership
    extra = 0
    readonly_fields = ('joined_at',)


# Group Admin -------------------------------------------------------------------------------------
@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    list_display = ('name', 'created_by', 'member_count', 'created_at')
    search_fields = ('name', 'created_by__email')
    inlines = [GroupMembershipInline]

    def member_count(self, obj):
        return obj.memberships.count()
    member_count.short_description = "Members"


# Group Message Admin -----------------------------------------------------------------------------
@admin.register(GroupMessage)
class GroupMessageAdmin(admin.ModelAdmin):
    list_display = ('group', 'sender', 'text_summary', 'created_at')
    list_filter = ('created_at',)
    search_fields = ('text', 'sender__email', 'group__name')

    def text_summary(self, obj):
        return obj.text[:50] + "..." if len(obj.text) > 50 else obj.text
    text_summary.short_description = "Text"
