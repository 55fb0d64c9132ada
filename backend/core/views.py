import logging
from collections import Counter
from datetime import timedelta

from django.core.exceptions import ObjectDoesNotExist
from django.db import transaction
from django.db.models import Avg, Count
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from rest_framework import exceptions, status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.gate import ADMIN, OPTIONAL, PUBLIC, GatedViewMixin
from .exceptions import error_body
from .listing import ListingParams, run_listing
from .models import ContactMessage, Experience, Project, Skill
from .notifications import send_contact_notification
from .resources import EXPERIENCE, MESSAGES, PROJECTS, SKILLS
from .serializers import (
    BulkIdsSerializer,
    ContactMessageSerializer,
    ContactReceiptSerializer,
    ExperienceSerializer,
    ImageUploadSerializer,
    MessageUpdateSerializer,
    ProficiencySerializer,
    ProjectSerializer,
    ReorderSerializer,
    SkillSerializer,
)
from .throttling import ContactRateThrottle
from .uploads import UPLOAD_CATEGORIES, store_image

logger = logging.getLogger(__name__)


def _top(values, n=10):
    return [{'name': name, 'count': count} for name, count in Counter(values).most_common(n)]


# ----- GENERIC RESOURCE -----

class ListableViewSet(GatedViewMixin, viewsets.ModelViewSet):
    """CRUD plus bulk delete for one resource, listing through the query engine."""

    descriptor = None
    noun = 'Record'
    access = {'list': PUBLIC, 'retrieve': PUBLIC, '*': ADMIN}
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        return self.descriptor.model.objects.all()

    def get_object(self):
        try:
            obj = self.get_queryset().get(pk=self.kwargs[self.lookup_field])
        except ObjectDoesNotExist:
            raise exceptions.NotFound(f'{self.noun} not found')
        self.check_object_permissions(self.request, obj)
        return obj

    def output_data(self, instance):
        return self.serializer_class(instance, context=self.get_serializer_context()).data

    def listing_response(self, queryset=None, **extra):
        params = ListingParams.from_query(self.request.query_params, self.descriptor)
        result = run_listing(self.descriptor, params, queryset)
        data = self.serializer_class(result.items, many=True, context=self.get_serializer_context()).data
        return Response({
            'success': True,
            'count': result.count,
            'total': result.total,
            **extra,
            'data': data,
        })

    def list(self, request, *args, **kwargs):
        return self.listing_response()

    def retrieve(self, request, *args, **kwargs):
        return Response({'success': True, 'data': self.output_data(self.get_object())})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        logger.info('created %s %s', self.descriptor.name, serializer.instance.pk)
        return Response({
            'success': True,
            'message': f'{self.noun} created successfully',
            'data': self.output_data(serializer.instance),
        }, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        self.perform_update(serializer)
        return Response({
            'success': True,
            'message': f'{self.noun} updated successfully',
            'data': self.output_data(serializer.instance),
        })

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        pk = instance.pk
        instance.delete()
        logger.info('deleted %s %s', self.descriptor.name, pk)
        return Response({'success': True, 'message': f'{self.noun} deleted successfully', 'data': {}})

    @action(detail=False, methods=['delete'], url_path='bulk/delete')
    def bulk_delete(self, request):
        serializer = BulkIdsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        deleted, _ = self.get_queryset().filter(pk__in=serializer.validated_data['ids']).delete()
        logger.info('bulk deleted %d %s', deleted, self.descriptor.name)
        return Response({
            'success': True,
            'message': f'{deleted} {self.noun.lower()}(s) deleted',
            'deleted': deleted,
            'data': {},
        })


class ReorderMixin:
    @action(detail=False, methods=['put'], url_path='reorder/bulk')
    def reorder(self, request):
        serializer = ReorderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entries = serializer.validated_data['items']

        ids = [e['id'] for e in entries]
        found = set(self.get_queryset().filter(pk__in=ids).values_list('pk', flat=True))
        missing = sorted(set(ids) - found)
        if missing:
            raise exceptions.ValidationError({'items': [f'Unknown ids: {missing}']})

        now = timezone.now()
        with transaction.atomic():
            for e in entries:
                self.get_queryset().filter(pk=e['id']).update(order=e['order'], updated_at=now)

        items = self.get_queryset().order_by(*self.descriptor.default_sort)
        return Response({
            'success': True,
            'message': f'{self.descriptor.name.capitalize()} reordered successfully',
            'data': self.serializer_class(items, many=True).data,
        })


# ----- PROJECTS -----

class ProjectViewSet(ReorderMixin, ListableViewSet):
    descriptor = PROJECTS
    noun = 'Project'
    serializer_class = ProjectSerializer
    access = {
        'list': PUBLIC,
        'retrieve': PUBLIC,
        'featured': PUBLIC,
        'by_category': PUBLIC,
        'stats': PUBLIC,
        '*': ADMIN,
    }

    @action(detail=False, methods=['get'], url_path='featured/list')
    def featured(self, request):
        return self.listing_response(Project.objects.filter(featured=True))

    @action(detail=False, methods=['get'], url_path=r'category/(?P<category>[^/]+)')
    def by_category(self, request, category=None):
        return self.listing_response(Project.objects.filter(category=category), category=category)

    @action(detail=True, methods=['put'], url_path='toggle-featured')
    def toggle_featured(self, request, pk=None):
        project = self.get_object()
        project.featured = not project.featured
        project.save(update_fields=['featured', 'updated_at'])
        state = 'featured' if project.featured else 'unfeatured'
        return Response({
            'success': True,
            'message': f'Project {state} successfully',
            'data': self.output_data(project),
        })

    @action(detail=False, methods=['get'], url_path='stats/summary')
    def stats(self, request):
        categories = (
            Project.objects.values('category').annotate(count=Count('id')).order_by('category')
        )
        technologies = [t for techs in Project.objects.values_list('technologies', flat=True) for t in techs]
        return Response({'success': True, 'data': {
            'total_projects': Project.objects.count(),
            'featured_projects': Project.objects.filter(featured=True).count(),
            'categories': list(categories),
            'total_technologies': len(set(technologies)),
            'top_technologies': _top(technologies),
        }})


# ----- SKILLS -----

class SkillViewSet(ReorderMixin, ListableViewSet):
    descriptor = SKILLS
    noun = 'Skill'
    serializer_class = SkillSerializer
    access = {
        'list': PUBLIC,
        'retrieve': PUBLIC,
        'grouped': PUBLIC,
        'by_category': PUBLIC,
        'stats': PUBLIC,
        '*': ADMIN,
    }

    @action(detail=False, methods=['get'], url_path='grouped/all')
    def grouped(self, request):
        groups = {}
        skills = Skill.objects.order_by(*SKILLS.default_sort)
        for skill in skills:
            groups.setdefault(skill.category, []).append(self.output_data(skill))
        return Response({'success': True, 'count': len(skills), 'data': groups})

    @action(detail=False, methods=['get'], url_path=r'category/(?P<category>[^/]+)')
    def by_category(self, request, category=None):
        return self.listing_response(Skill.objects.filter(category=category), category=category)

    @action(detail=True, methods=['put'], url_path='proficiency')
    def proficiency(self, request, pk=None):
        skill = self.get_object()
        serializer = ProficiencySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        skill.proficiency = serializer.validated_data['proficiency']
        skill.save(update_fields=['proficiency', 'updated_at'])
        return Response({
            'success': True,
            'message': 'Skill proficiency updated successfully',
            'data': self.output_data(skill),
        })

    @action(detail=False, methods=['get'], url_path='stats/summary')
    def stats(self, request):
        categories = (
            Skill.objects.values('category')
            .annotate(count=Count('id'), average_proficiency=Avg('proficiency'))
            .order_by('category')
        )
        average = Skill.objects.aggregate(avg=Avg('proficiency'))['avg']
        return Response({'success': True, 'data': {
            'total_skills': Skill.objects.count(),
            'average_proficiency': round(average, 1) if average is not None else None,
            'categories': list(categories),
        }})


# ----- MESSAGES -----

class MessageViewSet(ListableViewSet):
    descriptor = MESSAGES
    noun = 'Message'
    serializer_class = ContactMessageSerializer
    access = {'create': PUBLIC, '*': ADMIN}

    def get_serializer_class(self):
        if self.action in ('update', 'partial_update'):
            return MessageUpdateSerializer
        return ContactMessageSerializer

    def get_throttles(self):
        throttles = super().get_throttles()
        if self.action == 'create':
            throttles.append(ContactRateThrottle())
        return throttles

    def list(self, request, *args, **kwargs):
        return self.listing_response(unread=ContactMessage.objects.filter(read=False).count())

    def retrieve(self, request, *args, **kwargs):
        msg = self.get_object()
        msg.mark_read()
        return Response({'success': True, 'data': self.output_data(msg)})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        msg = serializer.save()
        logger.info('contact message %s received', msg.pk)
        send_contact_notification(msg)
        return Response({
            'success': True,
            'message': 'Your message has been sent successfully! We will get back to you soon.',
            'data': ContactReceiptSerializer(msg).data,
        }, status=status.HTTP_201_CREATED)

    def _set_read(self, read):
        msg = self.get_object()
        msg.read = read
        msg.save(update_fields=['read', 'updated_at'])
        return Response({
            'success': True,
            'message': f"Message marked as {'read' if read else 'unread'}",
            'data': self.output_data(msg),
        })

    @action(detail=True, methods=['put'], url_path='read')
    def mark_read(self, request, pk=None):
        return self._set_read(True)

    @action(detail=True, methods=['put'], url_path='unread')
    def mark_unread(self, request, pk=None):
        return self._set_read(False)

    @action(detail=False, methods=['put'], url_path='bulk/read')
    def bulk_read(self, request):
        serializer = BulkIdsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        updated = ContactMessage.objects.filter(
            pk__in=serializer.validated_data['ids']
        ).update(read=True, updated_at=timezone.now())
        return Response({
            'success': True,
            'message': f'{updated} message(s) marked as read',
            'updated': updated,
            'data': {},
        })

    @action(detail=False, methods=['get'], url_path='stats/summary')
    def stats(self, request):
        now = timezone.now()
        total = ContactMessage.objects.count()
        unread = ContactMessage.objects.filter(read=False).count()
        return Response({'success': True, 'data': {
            'total_messages': total,
            'read_messages': total - unread,
            'unread_messages': unread,
            'recent_messages': ContactMessage.objects.filter(
                created_at__gte=now - timedelta(days=7)).count(),
            'monthly_messages': ContactMessage.objects.filter(
                created_at__gte=now - timedelta(days=30)).count(),
        }})


# ----- EXPERIENCE -----

class ExperienceViewSet(ReorderMixin, ListableViewSet):
    descriptor = EXPERIENCE
    noun = 'Experience'
    serializer_class = ExperienceSerializer
    access = {'list': PUBLIC, 'retrieve': PUBLIC, 'stats': PUBLIC, '*': ADMIN}

    @action(detail=False, methods=['get'], url_path='stats/summary')
    def stats(self, request):
        technologies = [t for techs in Experience.objects.values_list('technologies', flat=True) for t in techs]
        return Response({'success': True, 'data': {
            'total_experience': Experience.objects.count(),
            'current_positions': Experience.objects.filter(current=True).count(),
            'companies': Experience.objects.values('company').distinct().count(),
            'top_technologies': _top(technologies),
        }})


# ----- UPLOADS -----

class ImageUploadView(GatedViewMixin, APIView):
    access = ADMIN
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request, category):
        if category not in UPLOAD_CATEGORIES:
            raise exceptions.NotFound(f"Unknown upload category '{category}'")
        serializer = ImageUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        path, url = store_image(category, serializer.validated_data['image'])
        logger.info('stored upload %s', path)
        return Response({'success': True, 'data': {'path': path, 'url': url}}, status=status.HTTP_201_CREATED)


# ----- HEALTH / FALLBACKS -----

class HealthView(GatedViewMixin, APIView):
    access = OPTIONAL

    def get(self, request):
        return Response({
            'success': True,
            'message': 'Server is running',
            'authenticated': request.user.is_authenticated,
        })


@csrf_exempt
def api_not_found(request, exception=None):
    return JsonResponse(error_body(f'Route {request.path} not found', reason='not_found'), status=404)


def api_server_error(request):
    return JsonResponse(error_body('Server Error', reason='server_error'), status=500)
