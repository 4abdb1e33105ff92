from django.urls import path
from . import views

app_name = 'main'

urlpatterns = [
    path('', views.calculator, name='calculator'),
    path('calculate/<str:tax_type>/', views.calculate, name='calculate'),
]
