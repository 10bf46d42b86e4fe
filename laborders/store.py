"""
EntityStore: a thin persistence facade over one soft-delete model.

Soft delete itself is enforced once, in models.SoftDeleteModel: the default
manager hides rows with deleted_at set, and every delete (instance or
queryset) is rewritten into an update of deleted_at. The store reads through
that manager, so Patient, LabTest and Order all get identical semantics.
Passing raw=True reads through all_objects instead; that path is reserved for
administrative lookups that must see deleted rows.

The store knows nothing about business rules. Storage failures surface as
StoreError.
"""

import copy
from functools import wraps

from django.db import DatabaseError, transaction
from django.db.models import Q

from .exceptions import StoreError
from .models import Order, OrderTest


def _guard(method):
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except DatabaseError as exc:
            raise StoreError(
                message=f'{self.model.__name__} storage operation failed.',
                detail={'operation': method.__name__},
            ) from exc
        except self.model.DoesNotExist as exc:
            raise StoreError(
                message=f'{self.model.__name__} does not exist or is deleted.',
                detail={'operation': method.__name__},
            ) from exc
    return wrapper


class EntityStore:

    def __init__(self, model, *, select_related=(), prefetch_related=()):
        self.model = model
        self.select_related = tuple(select_related)
        self.prefetch_related = tuple(prefetch_related)

    def _queryset(self, raw=False, with_related=False):
        manager = self.model.all_objects if raw else self.model.objects
        qs = manager.all()
        if with_related:
            if self.select_related:
                qs = qs.select_related(*self.select_related)
            if self.prefetch_related:
                qs = qs.prefetch_related(*self.prefetch_related)
        return qs

    @_guard
    def create(self, **fields):
        return self.model.objects.create(**fields)

    @_guard
    def find_by_id(self, pk, *, raw=False, with_related=False):
        """Instance or None. Deleted rows count as absent unless raw=True."""
        return self._queryset(raw, with_related).filter(pk=pk).first()

    @_guard
    def find_many(self, where=None, page=None, *, with_related=False):
        """
        (items, total). Newest first; total is counted before the page
        window (a PageRequest) is applied.
        """
        qs = self._queryset(with_related=with_related).filter(where or Q()).order_by('-created_at')
        total = qs.count()
        if page is not None:
            if page.skip >= total:
                return [], total
            qs = qs[page.skip:page.skip + page.limit]
        return list(qs), total

    @_guard
    def update(self, pk, fields):
        """Apply only the keys present in `fields`; everything else is left as is."""
        instance = self.model.objects.get(pk=pk)
        if not fields:
            return instance
        for name, value in fields.items():
            setattr(instance, name, value)
        instance.save(update_fields=[*fields.keys(), 'updated_at'])
        return instance

    @_guard
    def delete(self, pk):
        """Soft delete. Returns the row as it stood right before it was marked."""
        instance = self.model.objects.get(pk=pk)
        before = copy.copy(instance)
        instance.delete()
        return before

    @_guard
    def exists(self, pk) -> bool:
        return self.model.objects.filter(pk=pk).exists()

    @_guard
    def count(self, where=None) -> int:
        return self.model.objects.filter(where or Q()).count()


class OrderStore(EntityStore):
    """
    Orders own their OrderTest join rows: they are written together with the
    order and replaced wholesale (delete all, insert all) when the test set
    changes.
    """

    def __init__(self):
        super().__init__(
            Order,
            select_related=('patient',),
            prefetch_related=('order_tests__test',),
        )

    def _insert_tests(self, order_id, test_ids):
        OrderTest.objects.bulk_create(
            [OrderTest(order_id=order_id, test_id=test_id) for test_id in test_ids]
        )

    @_guard
    def create_with_tests(self, fields, test_ids):
        with transaction.atomic():
            order = self.model.objects.create(**fields)
            self._insert_tests(order.pk, test_ids)
        return order

    @_guard
    def update_with_tests(self, pk, fields, test_ids=None):
        """test_ids=None leaves the current test set alone."""
        with transaction.atomic():
            if test_ids is not None:
                OrderTest.objects.filter(order_id=pk).delete()
                self._insert_tests(pk, test_ids)
            return self.update(pk, fields)
