from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from riders.permissions import IsRider
from services.wallet_ledger import get_wallet, list_transactions, request_withdrawal
from .serializers import WalletSerializer, WalletTransactionSerializer, WithdrawalSerializer


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsRider])
def my_wallet(request):
    """Wallet balances and the 50 latest ledger entries"""
    wallet = get_wallet(request.user.id)
    transactions = list_transactions(request.user.id, limit=50)

    return Response({
        'wallet': WalletSerializer(wallet).data,
        'transactions': WalletTransactionSerializer(transactions, many=True).data,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsRider])
def my_transactions(request):
    try:
        limit = max(1, min(int(request.query_params.get('limit', 50)), 100))
        offset = max(0, int(request.query_params.get('offset', 0)))
    except ValueError:
        return Response({'error': 'limit and offset must be integers'}, status=status.HTTP_400_BAD_REQUEST)

    transactions = list_transactions(request.user.id, limit=limit, offset=offset)

    return Response({
        'transactions': WalletTransactionSerializer(transactions, many=True).data,
        'limit': limit,
        'offset': offset,
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsRider])
def withdraw(request):
    """Request a withdrawal; the amount is reserved from the balance immediately"""
    serializer = WithdrawalSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    entry = request_withdrawal(request.user.id, serializer.validated_data['amount'])
    wallet = get_wallet(request.user.id)

    return Response({
        'message': 'Withdrawal requested',
        'transaction': WalletTransactionSerializer(entry).data,
        'wallet': WalletSerializer(wallet).data,
    }, status=status.HTTP_201_CREATED)
