from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Project(models.Model):
    CATEGORY_CHOICES = [
        ('Web App', 'Web App'),
        ('Mobile App', 'Mobile App'),
        ('Full Stack', 'Full Stack'),
        ('Frontend', 'Frontend'),
        ('Backend', 'Backend'),
        ('Other', 'Other'),
    ]
    STATUS_CHOICES = [
        ('completed', 'Completed'),
        ('in-progress', 'In progress'),
        ('archived', 'Archived'),
    ]
    title = models.CharField(max_length=100, unique=True)
    description = models.TextField()
    short_description = models.CharField(max_length=200)
    image = models.CharField(max_length=500)  # upload path or external URL
    technologies = models.JSONField(default=list)
    # plain-text copy of technologies for listing search
    technologies_text = models.TextField(blank=True, editable=False)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='Other')
    repo_url = models.URLField(blank=True)
    live_url = models.URLField(blank=True)
    featured = models.BooleanField(default=False)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='completed')
    order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['order', '-created_at', '-id']

    def save(self, *args, **kwargs):
        self.technologies_text = '\n'.join(self.technologies or [])
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'technologies' in update_fields:
            kwargs['update_fields'] = set(update_fields) | {'technologies_text'}
        super().save(*args, **kwargs)

    def __str__(self):
        return self.title


class Skill(models.Model):
    CATEGORY_CHOICES = [
        ('Frontend', 'Frontend'),
        ('Backend', 'Backend'),
        ('Database', 'Database'),
        ('Tools', 'Tools'),
        ('Other', 'Other'),
    ]
    name = models.CharField(max_length=100, unique=True)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES)
    icon = models.CharField(max_length=200, blank=True)  # store icon class or image path
    proficiency = models.PositiveSmallIntegerField(
        default=0, validators=[MinValueValidator(0), MaxValueValidator(100)]
    )  # out of 100
    order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['order', 'name', 'id']

    def __str__(self):
        return self.name


class Experience(models.Model):
    role = models.CharField(max_length=200)
    company = models.CharField(max_length=200)
    location = models.CharField(max_length=200, blank=True)
    start_date = models.DateField()
    end_date = models.DateField(blank=True, null=True)
    current = models.BooleanField(default=False)
    description = models.TextField()
    responsibilities = models.JSONField(default=list, blank=True)
    technologies = models.JSONField(default=list, blank=True)
    order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['order', '-start_date', '-id']

    def save(self, *args, **kwargs):
        # a current position has no end date, whatever was submitted with it
        if self.current:
            self.end_date = None
            update_fields = kwargs.get('update_fields')
            if update_fields is not None and 'current' in update_fields:
                kwargs['update_fields'] = set(update_fields) | {'end_date'}
        super().save(*args, **kwargs)

    def __str__(self):
        return f'{self.role} at {self.company}'


class ContactMessage(models.Model):
    name = models.CharField(max_length=100)
    email = models.EmailField()
    subject = models.CharField(max_length=200)
    message = models.TextField()
    read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def mark_read(self):
        if not self.read:
            self.read = True
            self.save(update_fields=['read', 'updated_at'])

    def __str__(self):
        return f'Message from {self.name}'
