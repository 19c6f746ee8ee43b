"""
Task filters using django-filter.

Provides filtering for the task list endpoint:
- Status, priority and task type (multi-select)
- Assignee, department and project
- Due date range
- Archived flag (archived tasks are hidden unless requested)
- Search (title, description)
"""

import django_filters
from django.db.models import Q

from .models import Task


class TaskFilter(django_filters.FilterSet):
    """
    Task filter for list views.

    Usage in views:
        filterset = TaskFilter(request.GET, queryset=queryset)
        tasks = filterset.qs
    """

    search = django_filters.CharFilter(method='filter_search', label='Search')

    status = django_filters.MultipleChoiceFilter(choices=Task.Status.choices)
    priority = django_filters.MultipleChoiceFilter(choices=Task.Priority.choices)
    task_type = django_filters.MultipleChoiceFilter(choices=Task.TaskType.choices)

    due_from = django_filters.DateFilter(field_name='due_date', lookup_expr='gte')
    due_to = django_filters.DateFilter(field_name='due_date', lookup_expr='lte')

    archived = django_filters.BooleanFilter(field_name='archived')

    class Meta:
        model = Task
        fields = ['assignee', 'department', 'project']

    def filter_queryset(self, queryset):
        queryset = super().filter_queryset(queryset)
        if self.form.cleaned_data.get('archived') is None:
            queryset = queryset.filter(archived=False)
        return queryset

    def filter_search(self, queryset, name, value):
        """Search in title and description."""
        if not value:
            return queryset
        return queryset.filter(
            Q(title__icontains=value) |
            Q(description__icontains=value)
        )
