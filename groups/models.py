"""
Study groups. A student belongs to at most one group (accounts.User.group);
a group is enrolled in subjects through courses.Subject.enrolled_groups.
"""
from django.db import models


class Group(models.Model):
    """
    Group: named set of students.
    Deleting a group detaches its students (User.group is SET_NULL) and its
    subject enrollments; nobody is deleted.
    """
    name = models.CharField(max_length=255, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'groups'
        verbose_name = 'Group'
        verbose_name_plural = 'Groups'
        ordering = ['name']

    def __str__(self):
        return self.name
