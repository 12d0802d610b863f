from django.contrib import admin
from django.urls import path, include
from django.http import HttpResponse


def home_view(request):
    return HttpResponse("CreekSide construction tracking API")


urlpatterns = [
    path('', home_view, name='home'),
    path('admin/', admin.site.urls),

    # Authentication and user management
    path('auth/', include('authentication.urls')),
    path('api/users/', include('authentication.user_urls')),

    # Construction tracking
    path('api/projects/', include('projects.urls')),
    path('api/houses/', include('houses.urls')),
    path('api/activities/', include('activities.urls')),
    path('api/house-activities/', include('activities.house_activity_urls')),
    path('api/images/', include('images.urls')),
]
