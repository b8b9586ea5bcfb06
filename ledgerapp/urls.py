# ledgerapp/urls.py
from django.urls import path

from . import views

app_name = "ledgerapp"

urlpatterns = [
    path("sync/", views.sync_income, name="sync_income"),
    path("summary/", views.ledger_summary, name="ledger_summary"),
]
