from django.urls import path
from .views import ImageListCreateView, ImageDetailView

urlpatterns = [
    path('', ImageListCreateView.as_view(), name='image_list_create'),
    path('<uuid:image_id>/', ImageDetailView.as_view(), name='image_detail'),
]
