from rest_framework import viewsets, permissions, status
from rest_framework.decorators import action
from rest_framework.response import Response
from django.utils.translation import gettext_lazy as _

from apps.engagement.models import Wishlist, RecentlyViewed
from apps.engagement.services.wishlist_service import WishlistService
from apps.engagement.services.recently_viewed_service import RecentlyViewedService
from .serializers import WishlistSerializer, RecentlyViewedSerializer

FESTIVAL_PATH = r"(?P<festival_id>[^/.]+)"


class WishlistViewSet(viewsets.GenericViewSet):
    '''
    GET    /                      wishlist of the current user (paginated)
    POST   add/<festival_id>/     add a festival
    DELETE remove/<festival_id>/  remove a festival
    GET    check/<festival_id>/   is the festival wishlisted
    GET    count/                 number of wishlisted festivals
    DELETE clear/                 empty the wishlist
    '''
    permission_classes = [permissions.IsAuthenticated]
    serializer_class = WishlistSerializer
    queryset = Wishlist.objects.none()
    service = WishlistService()

    def list(self, request):
        queryset = self.service.list(request.user)
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(WishlistSerializer(page, many=True).data)
        return Response(WishlistSerializer(queryset, many=True).data)

    @action(detail=False, methods=['post'], url_name="add", url_path=f"add/{FESTIVAL_PATH}")
    def add(self, request, festival_id=None):
        item = self.service.add(request.user, festival_id)
        return Response(WishlistSerializer(item).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['delete'], url_name="remove", url_path=f"remove/{FESTIVAL_PATH}")
    def remove(self, request, festival_id=None):
        self.service.remove(request.user, festival_id)
        return Response({'message': _('Festival removed from wishlist.')})

    @action(detail=False, methods=['get'], url_name="check", url_path=f"check/{FESTIVAL_PATH}")
    def check(self, request, festival_id=None):
        return Response({
            'festival_id': festival_id,
            'is_in_wishlist': self.service.contains(request.user, festival_id),
        })

    @action(detail=False, methods=['get'], url_name="count", url_path="count")
    def count(self, request):
        return Response({'count': self.service.count(request.user)})

    @action(detail=False, methods=['delete'], url_name="clear", url_path="clear")
    def clear(self, request):
        deleted = self.service.clear(request.user)
        return Response({'message': _('Wishlist cleared.'), 'deleted': deleted})


class RecentlyViewedViewSet(viewsets.GenericViewSet):
    '''
    Festival view history of the current user, newest first
    '''
    permission_classes = [permissions.IsAuthenticated]
    serializer_class = RecentlyViewedSerializer
    queryset = RecentlyViewed.objects.none()
    service = RecentlyViewedService()

    def list(self, request):
        queryset = self.service.list(request.user)
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(RecentlyViewedSerializer(page, many=True).data)
        return Response(RecentlyViewedSerializer(queryset, many=True).data)

    @action(detail=False, methods=['post'], url_name="add", url_path=f"add/{FESTIVAL_PATH}")
    def add(self, request, festival_id=None):
        entry = self.service.record_view(request.user, festival_id)
        return Response(RecentlyViewedSerializer(entry).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'], url_name="most-viewed", url_path="most-viewed")
    def most_viewed(self, request):
        try:
            limit = int(request.query_params.get('limit', 10))
        except ValueError:
            limit = 10
        entries = self.service.most_viewed(request.user, limit=max(1, min(limit, 50)))
        return Response(RecentlyViewedSerializer(entries, many=True).data)

    @action(detail=False, methods=['delete'], url_name="remove", url_path=f"remove/{FESTIVAL_PATH}")
    def remove(self, request, festival_id=None):
        self.service.remove(request.user, festival_id)
        return Response({'message': _('Festival removed from recently viewed.')})

    @action(detail=False, methods=['delete'], url_name="clear", url_path="clear")
    def clear(self, request):
        deleted = self.service.clear(request.user)
        return Response({'message': _('Recently viewed history cleared.'), 'deleted': deleted})

    @action(detail=False, methods=['get'], url_name="stats", url_path="stats")
    def stats(self, request):
        return Response({'count': self.service.count(request.user), **self.service.stats(request.user)})
