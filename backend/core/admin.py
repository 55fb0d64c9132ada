from django.contrib import admin
from .models import ContactMessage, Experience, Project, Skill


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ('title', 'category', 'featured', 'status', 'order', 'created_at')
    list_filter = ('category', 'featured', 'status')
    search_fields = ('title', 'description', 'short_description')


@admin.register(Skill)
class SkillAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'proficiency', 'order')
    list_filter = ('category',)
    search_fields = ('name',)


@admin.register(Experience)
class ExperienceAdmin(admin.ModelAdmin):
    list_display = ('role', 'company', 'start_date', 'end_date', 'current', 'order')
    list_filter = ('current',)
    search_fields = ('company', 'role', 'description')


@admin.register(ContactMessage)
class ContactMessageAdmin(admin.ModelAdmin):
    list_display = ('name', 'email', 'subject', 'read', 'created_at')
    list_filter = ('read',)
    search_fields = ('name', 'email', 'subject', 'message')
    actions = ['mark_read']

    @admin.action(description='Mark selected messages as read')
    def mark_read(self, request, queryset):
        queryset.update(read=True)
