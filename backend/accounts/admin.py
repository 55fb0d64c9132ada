from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import User


@admin.register(User)
class PortfolioUserAdmin(UserAdmin):
    list_display = ('email', 'name', 'role', 'is_active', 'last_login')
    list_filter = ('role', 'is_active')
    search_fields = ('email', 'name')
    ordering = ('-date_joined',)
    fieldsets = UserAdmin.fieldsets + (('Portfolio', {'fields': ('name', 'role')}),)
