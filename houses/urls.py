from django.urls import path
from .views import HouseListCreateView, HouseStatsView, HouseDetailView

urlpatterns = [
    path('', HouseListCreateView.as_view(), name='house_list_create'),
    path('stats/', HouseStatsView.as_view(), name='house_stats'),
    path('<uuid:house_id>/', HouseDetailView.as_view(), name='house_detail'),
]
