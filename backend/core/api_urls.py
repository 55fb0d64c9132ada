from django.urls import include, path, re_path
from rest_framework.routers import SimpleRouter

from . import views

router = SimpleRouter()
router.register('projects', views.ProjectViewSet, basename='project')
router.register('skills', views.SkillViewSet, basename='skill')
router.register('messages', views.MessageViewSet, basename='message')
router.register('experience', views.ExperienceViewSet, basename='experience')

urlpatterns = [
    path('health/', views.HealthView.as_view(), name='health'),
    path('auth/', include('accounts.urls')),
    path('uploads/<str:category>/', views.ImageUploadView.as_view(), name='image-upload'),
    path('', include(router.urls)),
    # unmatched API paths answer JSON even when DEBUG is on
    re_path(r'^.*/$', views.api_not_found),
]
