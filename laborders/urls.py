from django.urls import path

from .views import (
    LabTestDetailView,
    LabTestListView,
    OrderDetailView,
    OrderListView,
    PatientDetailView,
    PatientListView,
    PatientOrdersView,
)

urlpatterns = [
    path('patients/', PatientListView.as_view(), name='patient-list'),
    path('patients/<str:patient_id>/', PatientDetailView.as_view(), name='patient-detail'),
    path('patients/<str:patient_id>/orders/', PatientOrdersView.as_view(), name='patient-orders'),
    path('tests/', LabTestListView.as_view(), name='lab-test-list'),
    path('tests/<str:test_id>/', LabTestDetailView.as_view(), name='lab-test-detail'),
    path('orders/', OrderListView.as_view(), name='order-list'),
    path('orders/<str:order_id>/', OrderDetailView.as_view(), name='order-detail'),
]
