from .listing import FilterField, ResourceDescriptor, parse_bool
from .models import ContactMessage, Experience, Project, Skill

PROJECTS = ResourceDescriptor(
    name='projects',
    model=Project,
    filters={
        'category': FilterField('category'),
        'featured': FilterField('featured', parse_bool),
        'status': FilterField('status'),
    },
    search_fields=('title', 'description', 'short_description', 'technologies_text'),
    sort_modes={
        'newest': ('-created_at', '-pk'),
        'oldest': ('created_at', 'pk'),
        'title': ('title', 'pk'),
    },
    default_sort=('order', '-created_at', '-pk'),
)

SKILLS = ResourceDescriptor(
    name='skills',
    model=Skill,
    filters={
        'category': FilterField('category'),
    },
    search_fields=('name', 'category'),
    sort_modes={
        'name': ('name', 'pk'),
        'proficiency-high': ('-proficiency', 'name', 'pk'),
        'proficiency-low': ('proficiency', 'name', 'pk'),
        'newest': ('-created_at', '-pk'),
        'oldest': ('created_at', 'pk'),
    },
    default_sort=('order', 'name', 'pk'),
)

MESSAGES = ResourceDescriptor(
    name='messages',
    model=ContactMessage,
    filters={
        'read': FilterField('read', parse_bool),
    },
    search_fields=('name', 'email', 'subject', 'message'),
    sort_modes={
        'newest': ('-created_at', '-pk'),
        'oldest': ('created_at', 'pk'),
    },
    default_sort=('-created_at', '-pk'),
)

EXPERIENCE = ResourceDescriptor(
    name='experience',
    model=Experience,
    filters={
        'current': FilterField('current', parse_bool),
    },
    search_fields=('company', 'role', 'description', 'location'),
    sort_modes={
        'newest': ('-start_date', '-pk'),
        'oldest': ('start_date', 'pk'),
    },
    default_sort=('order', '-start_date', '-pk'),
)
