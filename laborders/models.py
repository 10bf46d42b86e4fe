import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator, RegexValidator
from django.db import models
from django.utils import timezone


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class SoftDeleteQuerySet(models.QuerySet):
    """
    delete() marks live rows instead of removing them; rows already marked keep
    their original deleted_at. hard_delete() is the escape
    hatch for maintenance scripts.
    """

    def delete(self):
        now = timezone.now()
        return self.filter(deleted_at__isnull=True).update(deleted_at=now, updated_at=now)

    def hard_delete(self):
        return super().delete()


class SoftDeleteManager(models.Manager.from_queryset(SoftDeleteQuerySet)):
    """
    Default manager: filters out soft-deleted records.
    """

    use_in_migrations = True

    def get_queryset(self):
        return super().get_queryset().filter(deleted_at__isnull=True)


class AllObjectsManager(models.Manager.from_queryset(SoftDeleteQuerySet)):
    """Includes deleted records. Used for raw/administrative reads."""

    use_in_migrations = True


class SoftDeleteModel(TimeStampedModel):
    deleted_at = models.DateTimeField(null=True, blank=True, db_index=True)

    # Managers
    objects = SoftDeleteManager()        # Default: excludes deleted
    all_objects = AllObjectsManager()    # Includes deleted records

    class Meta:
        abstract = True
        # relations must still resolve rows that were soft-deleted later
        base_manager_name = 'all_objects'
        default_manager_name = 'objects'

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def delete(self, using=None, keep_parents=False):
        self.deleted_at = timezone.now()
        self.save(using=using, update_fields=['deleted_at', 'updated_at'])


class Gender(models.TextChoices):
    MALE = 'MALE', 'Male'
    FEMALE = 'FEMALE', 'Female'


class OrderStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    PROCESSING = 'PROCESSING', 'Processing'
    COMPLETED = 'COMPLETED', 'Completed'
    CANCELLED = 'CANCELLED', 'Cancelled'


lab_test_code_validator = RegexValidator(
    regex=r'^[A-Z0-9_-]+$',
    message='Code must contain only uppercase letters, numbers, hyphens, and underscores.',
)


class Patient(SoftDeleteModel):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    dob = models.DateField()
    phone = models.CharField(max_length=20, blank=True, null=True)
    gender = models.CharField(max_length=6, choices=Gender.choices)
    address = models.CharField(max_length=500, blank=True, null=True)

    class Meta(SoftDeleteModel.Meta):
        db_table = 'patients'
        ordering = ['-created_at']
        indexes = [models.Index(fields=['dob'], name='patients_dob_idx')]

    def __str__(self):
        return f'{self.name} ({self.dob})'


class LabTest(SoftDeleteModel):
    """A billable laboratory test from the catalog."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    # unique by convention only
    code = models.CharField(max_length=50, validators=[lab_test_code_validator])
    name = models.CharField(max_length=255)
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    turnaround_days = models.PositiveIntegerField()
    is_available = models.BooleanField(default=True)

    class Meta(SoftDeleteModel.Meta):
        db_table = 'tests'
        ordering = ['-created_at']

    def __str__(self):
        return f'{self.code} - {self.name}'


class Order(SoftDeleteModel):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    patient = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name='orders')
    total_cost = models.DecimalField(max_digits=12, decimal_places=2)
    ready_date = models.DateTimeField()
    status = models.CharField(max_length=20, choices=OrderStatus.choices, default=OrderStatus.PENDING)

    class Meta(SoftDeleteModel.Meta):
        db_table = 'orders'
        ordering = ['-created_at']
        indexes = [models.Index(fields=['status'], name='orders_status_idx')]

    def __str__(self):
        return f'Order {self.id} ({self.status})'


class OrderTest(models.Model):
    """Join row between an order and one of its tests. Lives and dies with the order's test set."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='order_tests')
    test = models.ForeignKey(LabTest, on_delete=models.PROTECT, related_name='order_tests')

    class Meta:
        db_table = 'order_tests'
