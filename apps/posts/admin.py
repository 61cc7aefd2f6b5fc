from django.contrib import admin

from .models import Comment, Post, Reaction


# Reactions Admin ---------------------------------------------------------------------------------
@admin.register(Reaction)
class ReactionAdmin(admin.ModelAdmin):
    list_display = ('user', 'reaction_type', 'target_type', 'target_id', 'created_at')
    search_fields = ('user__email', 'reaction_type')
    list_filter = ('reaction_type', 'target_type', 'created_at')


# Post Admin ---------------------------------------------------------------------------------------
@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ['owner', 'text_summary', 'comment_count', 'reaction_total', 'created_at']
    search_fields = ['owner__email', 'text']
    readonly_fields = ['reaction_counts', 'comment_count']
    date_hierarchy = 'created_at'

    def text_summary(self, obj):
        return obj.text[:50] + "..." if len(obj.text) > 50 else obj.text
    text_summary.short_description = "Text"

    def reaction_total(self, obj):
        return (obj.reaction_counts or {}).get('total', 0)
    reaction_total.short_description = "Reactions"


# Comment Admin ------------------------------------------------------------------------------------
@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ['owner', 'comment_summary', 'post', 'parent', 'reply_count', 'created_at']
    list_filter = ['created_at']
    search_fields = ['owner__email', 'text']
    readonly_fields = ['reaction_counts', 'reply_count']
    date_hierarchy = 'created_at'

    def comment_summary(self, obj):
        return obj.text[:50] + "..." if len(obj.text) > 50 else obj.text
    comment_summary.short_description = "Comment"
