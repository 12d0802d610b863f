from django.urls import path
from workflow.views import ActivityStatusHistoryView
from .views import HouseActivityListView, HouseActivityStatsView, HouseActivityDetailView

urlpatterns = [
    path('', HouseActivityListView.as_view(), name='house_activity_list'),
    path('stats/', HouseActivityStatsView.as_view(), name='house_activity_stats'),
    path('<uuid:house_activity_id>/', HouseActivityDetailView.as_view(), name='house_activity_detail'),
    path('<uuid:house_activity_id>/history/', ActivityStatusHistoryView.as_view(), name='house_activity_history'),
]
