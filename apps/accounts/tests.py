from django.test import TestCase

from apps.accounts.models import User


class UserManagerTest(TestCase):
    def test_create_user_defaults_to_learner(self):
        user = User.objects.create_user(email='Learner@Example.COM', password='pass123')

        self.assertEqual(user.email, 'Learner@example.com')
        self.assertTrue(user.is_learner)
        self.assertFalse(user.is_staff)
        self.assertIsNone(user.current_cohort)
        self.assertTrue(user.check_password('pass123'))

    def test_create_admin_is_staff(self):
        admin = User.objects.create_admin(email='admin@example.com', password='pass123')

        self.assertTrue(admin.is_staff)
        self.assertTrue(admin.is_cohort_admin)
        self.assertFalse(admin.is_superuser)

    def test_create_superuser(self):
        root = User.objects.create_superuser(email='root@example.com', password='pass123')

        self.assertTrue(root.is_superuser)
        self.assertEqual(root.role, User.Role.ADMIN)

    def test_email_required(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email='', password='pass123')

    def test_display_names(self):
        user = User(email='ada@example.com', full_name='Ada Lovelace')

        self.assertEqual(user.get_full_name(), 'Ada Lovelace')
        self.assertEqual(user.get_short_name(), 'Ada Lovelace')
        user.display_name = 'ada'
        self.assertEqual(user.get_short_name(), 'ada')
