"""
apps.configuration.urls
~~~~~~~~~~~~~~~~~~~~~~~
URL routing for groups, items and environments.
Mounted at /api/v1/ by the root URLconf.
"""
from django.urls import path

from .views import (
    EnvironmentListView,
    GroupByNameView,
    GroupDetailView,
    GroupListCreateView,
    ItemDetailView,
    ItemListCreateView,
    ItemsByGroupAndEnvironmentView,
    ItemsByGroupView,
)

urlpatterns = [
    path("groups/", GroupListCreateView.as_view(), name="group-list-create"),
    path("groups/name/<path:name>/", GroupByNameView.as_view(), name="group-by-name"),
    path("groups/<int:pk>/", GroupDetailView.as_view(), name="group-detail"),
    path("items/", ItemListCreateView.as_view(), name="item-list-create"),
    path("items/<int:pk>/", ItemDetailView.as_view(), name="item-detail"),
    path(
        "items/group/<int:group_id>/",
        ItemsByGroupView.as_view(),
        name="items-by-group",
    ),
    path(
        "items/group/<int:group_id>/environment/<str:environment>/",
        ItemsByGroupAndEnvironmentView.as_view(),
        name="items-by-group-environment",
    ),
    path("environments/", EnvironmentListView.as_view(), name="environment-list"),
]
