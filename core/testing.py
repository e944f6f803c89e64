"""
Shared fixtures for the app test modules.
"""
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from assessments.models import AnswerOption, Question, Test
from courses.models import Lecture, Subject
from groups.models import Group


def auth_header(user):
    token = str(AccessToken.for_user(user))
    return {"HTTP_AUTHORIZATION": f"Bearer {token}"}


def make_user(email, role, group=None, password="pass12345"):
    return User.objects.create_user(
        email=email,
        password=password,
        full_name=email.split("@")[0].title(),
        role=role,
        group=group,
    )


def make_question(test, qtype=Question.Type.SINGLE, points=1, correct=(0,), count=3):
    """Question with `count` options; indexes in `correct` are the right ones."""
    question = Question.objects.create(test=test, text=f"Q{test.questions.count() + 1}", type=qtype, points=points)
    options = [
        AnswerOption.objects.create(question=question, text=f"opt {i}", is_correct=i in correct, order_index=i)
        for i in range(count)
    ]
    return question, options


class CourseFixture:
    """
    Group G with one student, a teacher assigned to subject S, an outsider
    student without a group, an admin. S is published with one published
    lecture and one published test holding one Single question.
    """

    def __init__(self):
        self.group = Group.objects.create(name="G1")
        self.student = make_user("student@test.local", User.ROLE_STUDENT, group=self.group)
        self.outsider = make_user("outsider@test.local", User.ROLE_STUDENT)
        self.teacher = make_user("teacher@test.local", User.ROLE_TEACHER)
        self.other_teacher = make_user("other.teacher@test.local", User.ROLE_TEACHER)
        self.admin = make_user("admin@test.local", User.ROLE_ADMIN)

        self.subject = Subject.objects.create(title="Algebra", status=Subject.Status.PUBLISHED)
        self.subject.teachers.add(self.teacher)
        self.subject.enrolled_groups.add(self.group)

        self.lecture = Lecture.objects.create(
            subject=self.subject,
            title="Intro",
            file="lectures/intro.pdf",
            original_filename="intro.pdf",
            status=Lecture.Status.PUBLISHED,
        )
        self.test = Test.objects.create(subject=self.subject, title="Quiz 1", status=Test.Status.PUBLISHED)
        self.question, self.options = make_question(self.test, points=5, correct=(1,))
