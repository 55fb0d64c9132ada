from django.urls import path
from . import views

urlpatterns = [
    path('login/', views.LoginView.as_view(), name='auth-login'),
    path('register/', views.RegisterView.as_view(), name='auth-register'),
    path('me/', views.MeView.as_view(), name='auth-me'),
    path('update-password/', views.PasswordUpdateView.as_view(), name='auth-update-password'),
    path('users/', views.UserListView.as_view(), name='auth-users'),
    path('users/<int:pk>/', views.UserDetailView.as_view(), name='auth-user-detail'),
    path('users/<int:pk>/role/', views.UserRoleView.as_view(), name='auth-user-role'),
    path('stats/', views.UserStatsView.as_view(), name='auth-stats'),
]
