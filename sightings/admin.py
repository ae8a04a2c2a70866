from django.contrib import admin, messages
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.urls import reverse
from django.utils.html import format_html
from sightings.models import Comment, Photo, Report, User
from sightings.reportables import target_for
from sightings.services.moderation import (
    ACTION_APPROVE,
    ACTION_DELETE,
    ACTION_HIDE,
    ModerationService,
)


def _active_report_count(obj):
    """Return formatted count of pending reports against a photo or comment."""
    count = Report.objects.pending().for_content(obj).count()
    if count > 0:
        return format_html('<span style="color:red; font-weight:bold;">{} Reports</span>', count)
    return "0"


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """User admin with role and violation columns."""
    list_display = ('username', 'email', 'display_name', 'role', 'violation_count', 'violation_flagged')
    list_filter = ('role', 'violation_flagged', 'is_active')
    search_fields = ('username', 'email', 'display_name')
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Moderation', {'fields': ('role', 'display_name', 'violation_count', 'violation_flagged', 'deleted_at')}),
        ('Notifications', {'fields': ('firebase_uid', 'notification_settings')}),
    )
    readonly_fields = ('violation_count',)


@admin.register(Photo)
class PhotoAdmin(admin.ModelAdmin):
    """Admin configuration for photos with moderation columns."""
    list_display = ('__str__', 'user', 'created_at', 'moderation_status', 'is_visible', 'report_count_display')
    list_filter = ('moderation_status', 'is_visible', 'created_at')
    search_fields = ('title', 'description', 'user__username')

    @admin.display(description="Active Reports")
    def report_count_display(self, obj):
        return _active_report_count(obj)


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    """Admin configuration for comments with moderation columns."""
    list_display = ('short_text', 'user', 'photo', 'is_visible', 'deleted_at', 'report_count_display')
    list_filter = ('is_visible', 'created_at')
    search_fields = ('content', 'user__username')

    def short_text(self, obj):
        """Shorten comment text for list display."""
        return obj.content[:50] + "..." if len(obj.content) > 50 else obj.content

    @admin.display(description="Active Reports")
    def report_count_display(self, obj):
        return _active_report_count(obj)


@admin.register(Report)
class ReportAdmin(admin.ModelAdmin):
    """
    Admin configuration for user-submitted reports.

    Status and reviewer are read-only here: the bulk actions below run each
    report through ModerationService so content, violations and
    notifications stay consistent with the API.
    """
    list_display = ('target_object', 'reason', 'reporter', 'created_at', 'status', 'resolved_by')
    list_filter = ('status', 'reportable_type', 'created_at')
    readonly_fields = ('reporter', 'reportable_type', 'reportable_id', 'status', 'resolved_by', 'created_at', 'updated_at')
    actions = ['approve_reports', 'hide_content', 'delete_content']

    def has_delete_permission(self, request, obj=None):
        """Reports are kept for violation history; they are never deleted."""
        return False

    @admin.display(description="Reported Content")
    def target_object(self, obj):
        """Return a link to the reported object for quick navigation."""
        target = target_for(obj)
        if target is None:
            return "Deleted Content"
        link = reverse(f"admin:sightings_{target.kind.lower()}_change", args=[target.content_id])
        return format_html('<a href="{}">{}: {}</a>', link, target.kind, target.preview())

    def _process(self, request, queryset, action):
        service = ModerationService()
        processed, failed = 0, 0
        for report_id in queryset.values_list("pk", flat=True):
            result = service.process_report(report_id, action, request.user)
            if result.success:
                processed += 1
            else:
                failed += 1
        if processed:
            self.message_user(request, f"{processed} report(s) processed with '{action}'.", messages.SUCCESS)
        if failed:
            self.message_user(request, f"{failed} report(s) could not be processed.", messages.WARNING)

    @admin.action(description='Approve selected reports (keep content)')
    def approve_reports(self, request, queryset):
        self._process(request, queryset, ACTION_APPROVE)

    @admin.action(description='Hide reported content')
    def hide_content(self, request, queryset):
        self._process(request, queryset, ACTION_HIDE)

    @admin.action(description='Delete reported content')
    def delete_content(self, request, queryset):
        self._process(request, queryset, ACTION_DELETE)
