from django.urls import path

from .views import NetWorthProjectionView

urlpatterns = [
    path("net_worth_projections/", NetWorthProjectionView.as_view(), name="net-worth-projections"),
]
