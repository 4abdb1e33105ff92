from django.urls import path
from .apis import (
    paye,
    vat,
    wht,
    cit,
    pit,
    sme,
    informal,
    schedule_detail,
)

urlpatterns = [
    path('paye/', paye, name='paye'),
    path('vat/', vat, name='vat'),
    path('wht/', wht, name='wht'),
    path('cit/', cit, name='cit'),
    path('pit/', pit, name='pit'),
    path('sme/', sme, name='sme'),
    path('informal/', informal, name='informal'),
    path('schedule/', schedule_detail, name='schedule'),
]
