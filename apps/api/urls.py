"""
API URL configuration for the sticker registry.
"""

from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView, SpectacularRedocView
from apps.core.models import PartyKind
from . import views

app_name = 'api'


def party_routes(prefix, kind):
    return [
        path(f'{prefix}/<str:pk>/', views.PartyDetailView.as_view(party_kind=kind), name=f'{kind}-detail'),
        path(f'{prefix}/<str:pk>/vehicles/', views.PartyVehicleListView.as_view(party_kind=kind), name=f'{kind}-vehicles'),
        path(f'{prefix}/<str:pk>/vehicles/count/', views.PartyVehicleCountView.as_view(party_kind=kind), name=f'{kind}-vehicle-count'),
    ]


v1_patterns = [
    path('body-types/', views.BodyTypeListView.as_view(), name='bodytype-list'),
    path('body-types/<str:pk>/', views.BodyTypeDetailView.as_view(), name='bodytype-detail'),
    path('vehicle-types/', views.VehicleTypeListView.as_view(), name='vehicletype-list'),
    path('vehicle-types/<str:pk>/', views.VehicleTypeDetailView.as_view(), name='vehicletype-detail'),
    *party_routes('clients', PartyKind.CLIENT.value),
    *party_routes('customers', PartyKind.CUSTOMER.value),
    path('vehicles/<str:pk>/deactivate/', views.VehicleDeactivateView.as_view(), name='vehicle-deactivate'),
    path('policies/', views.PolicyListView.as_view(), name='policy-list'),
    path('policies/<str:pk>/', views.PolicyDetailView.as_view(), name='policy-detail'),
    path('stickers/', views.StickerListView.as_view(), name='sticker-list'),
    path('stickers/<str:pk>/', views.StickerDetailView.as_view(), name='sticker-detail'),
]

urlpatterns = [
    path('v1/', include(v1_patterns)),
    path('schema/', SpectacularAPIView.as_view(), name='schema'),
    path('docs/', SpectacularSwaggerView.as_view(url_name='api:schema'), name='swagger-ui'),
    path('redoc/', SpectacularRedocView.as_view(url_name='api:schema'), name='redoc'),
]
