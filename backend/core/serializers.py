from rest_framework import serializers

from .models import ContactMessage, Experience, Project, Skill
from .uploads import ALLOWED_EXTENSIONS, MAX_UPLOAD_MB


def _distinct(values):
    seen = []
    for v in values:
        v = v.strip()
        if v and v not in seen:
            seen.append(v)
    return seen


class ProjectSerializer(serializers.ModelSerializer):
    technologies = serializers.ListField(
        child=serializers.CharField(max_length=50), allow_empty=False
    )

    class Meta:
        model = Project
        fields = [
            'id', 'title', 'description', 'short_description', 'image', 'technologies',
            'category', 'repo_url', 'live_url', 'featured', 'status', 'order',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']
        extra_kwargs = {
            'title': {'min_length': 3},
            'description': {'min_length': 10, 'max_length': 2000},
            'short_description': {'min_length': 10},
        }

    def validate_technologies(self, value):
        value = _distinct(value)
        if not value:
            raise serializers.ValidationError('Please provide at least one technology')
        return value


class SkillSerializer(serializers.ModelSerializer):
    class Meta:
        model = Skill
        fields = ['id', 'name', 'category', 'icon', 'proficiency', 'order', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']


class ExperienceSerializer(serializers.ModelSerializer):
    responsibilities = serializers.ListField(child=serializers.CharField(), required=False)
    technologies = serializers.ListField(child=serializers.CharField(max_length=50), required=False)

    class Meta:
        model = Experience
        fields = [
            'id', 'company', 'role', 'location', 'start_date', 'end_date', 'current',
            'description', 'responsibilities', 'technologies', 'order',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_technologies(self, value):
        return _distinct(value)

    def validate(self, attrs):
        instance = self.instance
        current = attrs.get('current', instance.current if instance else False)
        if current:
            # end date is meaningless for an ongoing position
            attrs['end_date'] = None
            return attrs
        start = attrs.get('start_date', instance.start_date if instance else None)
        end = attrs.get('end_date', instance.end_date if instance else None)
        if start and end and end < start:
            raise serializers.ValidationError({'end_date': 'End date cannot be before start date'})
        return attrs


class ContactMessageSerializer(serializers.ModelSerializer):
    class Meta:
        model = ContactMessage
        fields = ['id', 'name', 'email', 'subject', 'message', 'read', 'created_at', 'updated_at']
        read_only_fields = ['id', 'read', 'created_at', 'updated_at']


class ContactReceiptSerializer(serializers.ModelSerializer):
    """What the public sender gets back after submitting the form."""

    class Meta:
        model = ContactMessage
        fields = ['id', 'name', 'email', 'subject', 'created_at']


class MessageUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = ContactMessage
        fields = ['read']


class BulkIdsSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False)


class OrderEntrySerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=1)
    order = serializers.IntegerField()


class ReorderSerializer(serializers.Serializer):
    items = OrderEntrySerializer(many=True, allow_empty=False)


class ProficiencySerializer(serializers.Serializer):
    proficiency = serializers.IntegerField(min_value=0, max_value=100)


class ImageUploadSerializer(serializers.Serializer):
    image = serializers.ImageField()

    def validate_image(self, f):
        ext = f.name.rsplit('.', 1)[-1].lower() if '.' in f.name else ''
        if ext not in ALLOWED_EXTENSIONS:
            raise serializers.ValidationError(
                f"Only image files are allowed ({', '.join(ALLOWED_EXTENSIONS)})"
            )
        if f.size > MAX_UPLOAD_MB * 1024 * 1024:
            raise serializers.ValidationError(f'File too large. Maximum size is {MAX_UPLOAD_MB}MB')
        return f
