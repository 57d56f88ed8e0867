from rest_framework.routers import DefaultRouter

from .views import TelemedicineSessionViewSet

router = DefaultRouter()
router.register(r'telemedicine', TelemedicineSessionViewSet, basename='telemedicine')

urlpatterns = router.urls
