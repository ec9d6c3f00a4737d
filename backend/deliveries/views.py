from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from .serializers import (
    DeliveryOrderSerializer,
    CreateDeliveryOrderSerializer,
    AcceptOrderSerializer,
    StatusUpdateSerializer,
    MatchingQuerySerializer,
    RiderCandidateSerializer,
)

# Import from services layer
from services.matching import MatchingCriteria, find_matching_riders
from services.order_management import (
    OrderFilters,
    create_order,
    accept_order,
    update_order_status,
    list_orders,
    get_order_by_id,
    matching_criteria_for_order,
)


def _int_param(request, name, default=None):
    value = request.query_params.get(name)
    if value in (None, ''):
        return default
    try:
        return int(value)
    except ValueError:
        return default


# ==================== Store Order APIs ====================

@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def orders(request):
    """
    GET: list orders, filtered by status / rider_id / store_id, paginated by limit / offset
    POST: create a new pending order for a partner store
    """
    if request.method == 'POST':
        serializer = CreateDeliveryOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = create_order(serializer.validated_data)
        return Response(DeliveryOrderSerializer(order).data, status=status.HTTP_201_CREATED)

    filters = OrderFilters(
        status=request.query_params.get('status') or None,
        rider_id=_int_param(request, 'rider_id'),
        store_id=_int_param(request, 'store_id'),
        limit=max(1, min(_int_param(request, 'limit', 50), 100)),
        offset=max(0, _int_param(request, 'offset', 0)),
    )
    results, total = list_orders(filters)

    return Response({
        'orders': DeliveryOrderSerializer(results, many=True).data,
        'total': total,
        'limit': filters.limit,
        'offset': filters.offset,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def order_detail(request, order_id):
    order = get_order_by_id(order_id)
    return Response(DeliveryOrderSerializer(order).data)


# ==================== Matching APIs ====================

@api_view(['GET'])
@permission_classes([IsAuthenticated])
def matching_riders(request):
    """
    Rank eligible riders around a point.

    Query: lat, lng, radius (km), and optionally store_lat, store_lng,
    delivery_lat, delivery_lng to enable vehicle range gating.
    """
    serializer = MatchingQuerySerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    params = serializer.validated_data

    criteria = MatchingCriteria(
        latitude=params['lat'],
        longitude=params['lng'],
        radius=params['radius'],
        store_latitude=params.get('store_lat'),
        store_longitude=params.get('store_lng'),
        delivery_latitude=params.get('delivery_lat'),
        delivery_longitude=params.get('delivery_lng'),
    )
    candidates = find_matching_riders(criteria)

    return Response({
        'riders': RiderCandidateSerializer(candidates, many=True).data,
        'count': len(candidates),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def order_matching_riders(request, order_id):
    """Rank eligible riders for a stored order, using its store and destination"""
    order = get_order_by_id(order_id)

    radius = request.query_params.get('radius')
    try:
        radius = float(radius) if radius not in (None, '') else None
    except ValueError:
        return Response({'error': 'radius must be a number'}, status=status.HTTP_400_BAD_REQUEST)

    candidates = find_matching_riders(matching_criteria_for_order(order, radius))

    return Response({
        'order_id': order.id,
        'riders': RiderCandidateSerializer(candidates, many=True).data,
        'count': len(candidates),
    })


# ==================== Rider Order Actions ====================

@api_view(['POST'])
@permission_classes([IsAuthenticated])
def accept(request, order_id):
    """
    Accept a pending order.

    Locks in the rider's commission, the trip distance and the ETA.
    Returns 409 when another rider accepted first.
    """
    serializer = AcceptOrderSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    rider_id = serializer.validated_data.get('rider_id', request.user.id)
    rider_name = serializer.validated_data.get('rider_name') or request.user.display_name

    order = accept_order(order_id, rider_id, rider_name)

    return Response({
        'message': 'Order accepted successfully',
        'order': DeliveryOrderSerializer(order).data,
    })


@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def update_status(request, order_id):
    """Move an order to inProgress, completed or cancelled"""
    serializer = StatusUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    order = update_order_status(order_id, serializer.validated_data['status'])

    return Response({
        'message': f'Order status is {order.status}',
        'order': DeliveryOrderSerializer(order).data,
    })
