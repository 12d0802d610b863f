from django.urls import path
from .views import ActivityListCreateView, ActivityDetailView

urlpatterns = [
    path('', ActivityListCreateView.as_view(), name='activity_list_create'),
    path('<uuid:activity_id>/', ActivityDetailView.as_view(), name='activity_detail'),
]
