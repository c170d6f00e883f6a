from django.urls import path

from . import views

app_name = "stock_adjust"

urlpatterns = [
    path("update-stock/", views.update_stock, name="update_stock"),
]
