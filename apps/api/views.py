"""
RESTful API for the sticker registry.
Thin transport adapter: parses requests, calls the core services, serializes
results. Failures are rendered by ``apps.core.error_handlers.api_exception_handler``.
"""

from django.conf import settings
from rest_framework import serializers, status
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.core import services
from apps.core.exceptions import ValidationViolation
from apps.core.models import Policy, Sticker, StickerStatus, Vehicle
from apps.core.storage import OperationContext

TIMEOUT_HEADER = 'X-Request-Timeout'


# Serializers
class CatalogEntrySerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    vehicle_count = serializers.IntegerField(required=False)


class CatalogDetailSerializer(CatalogEntrySerializer):
    description = serializers.CharField(allow_blank=True)
    is_active = serializers.BooleanField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class OwnerField(serializers.Field):
    """Renders an ``Owner`` value as ``{'kind': ..., 'id': ...}``."""

    def to_representation(self, value):
        return {'kind': value.kind.value, 'id': str(value.id)}


class PartySerializer(serializers.Serializer):
    id = serializers.UUIDField()
    kind = serializers.CharField(source='kind.value')
    party_type = serializers.CharField()
    name = serializers.CharField()
    email = serializers.EmailField()
    phone = serializers.CharField()
    address = serializers.CharField()
    is_active = serializers.BooleanField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class VehicleSerializer(serializers.ModelSerializer):
    owner = OwnerField(read_only=True)
    body_type_name = serializers.CharField(source='body_type.name', read_only=True)
    vehicle_type_name = serializers.CharField(source='vehicle_type.name', read_only=True)

    class Meta:
        model = Vehicle
        fields = [
            'id', 'registration_no', 'make', 'model', 'year', 'chassis_number',
            'engine_number', 'body_type', 'body_type_name', 'vehicle_type',
            'vehicle_type_name', 'owner', 'is_active', 'deleted_at',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class VehicleCountSerializer(serializers.Serializer):
    count = serializers.IntegerField(min_value=0)


class PolicySerializer(serializers.ModelSerializer):
    party = OwnerField(source='owner', read_only=True)

    class Meta:
        model = Policy
        fields = [
            'id', 'policy_no', 'valid_from', 'valid_to', 'status', 'vehicle',
            'party', 'is_active', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class PolicyCreateSerializer(serializers.Serializer):
    vehicle = serializers.UUIDField()
    policy_no = serializers.CharField(max_length=100)
    valid_from = serializers.DateField()
    valid_to = serializers.DateField()
    status = serializers.ChoiceField(choices=Policy.STATUS_CHOICES, default=Policy.STATUS_PENDING)


class StickerSerializer(serializers.ModelSerializer):
    """Full sticker record, with the policy summary the listing shows."""

    policy_no = serializers.CharField(source='policy.policy_no', read_only=True)
    registration_no = serializers.CharField(source='policy.vehicle.registration_no', read_only=True)
    party = OwnerField(source='policy.owner', read_only=True)

    class Meta:
        model = Sticker
        fields = [
            'id', 'sticker_no', 'status', 'policy', 'policy_no', 'registration_no',
            'party', 'stock', 'is_active', 'deleted_at', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class StickerCreateSerializer(serializers.Serializer):
    sticker_no = serializers.CharField(max_length=100)
    policy = serializers.UUIDField()
    stock = serializers.UUIDField(required=False, allow_null=True)


# Views
class CoreAPIView(APIView):
    """
    Base view: builds the per-request ``OperationContext`` and resolves the
    acting user.
    """

    def operation_context(self):
        raw = self.request.headers.get(TIMEOUT_HEADER)
        if raw is None:
            return OperationContext.with_timeout(getattr(settings, 'CORE_OPERATION_TIMEOUT', None))
        try:
            seconds = float(raw)
        except ValueError:
            raise ValidationViolation(f"{TIMEOUT_HEADER} must be a number of seconds") from None
        if seconds <= 0:
            raise ValidationViolation(f"{TIMEOUT_HEADER} must be positive")
        return OperationContext.with_timeout(seconds)

    def actor(self):
        user = getattr(self.request, 'user', None)
        return user if user is not None and user.is_authenticated else None

    def include_stats(self):
        return self.request.query_params.get('include') == 'stats'


INCLUDE_STATS = OpenApiParameter('include', str, description="Pass 'stats' to add vehicle counts")


class BodyTypeListView(CoreAPIView):
    @extend_schema(parameters=[INCLUDE_STATS], responses=CatalogEntrySerializer(many=True))
    def get(self, request):
        rows = services.list_body_types(include_stats=self.include_stats(), context=self.operation_context())
        return Response(CatalogEntrySerializer(rows, many=True).data)


class BodyTypeDetailView(CoreAPIView):
    @extend_schema(responses=CatalogDetailSerializer)
    def get(self, request, pk):
        row = services.get_body_type(pk, context=self.operation_context())
        return Response(CatalogDetailSerializer(row).data)


class VehicleTypeListView(CoreAPIView):
    @extend_schema(parameters=[INCLUDE_STATS], responses=CatalogEntrySerializer(many=True))
    def get(self, request):
        rows = services.list_vehicle_types(include_stats=self.include_stats(), context=self.operation_context())
        return Response(CatalogEntrySerializer(rows, many=True).data)


class VehicleTypeDetailView(CoreAPIView):
    @extend_schema(responses=CatalogDetailSerializer)
    def get(self, request, pk):
        row = services.get_vehicle_type(pk, context=self.operation_context())
        return Response(CatalogDetailSerializer(row).data)


class PartyDetailView(CoreAPIView):
    party_kind = None

    @extend_schema(responses=PartySerializer)
    def get(self, request, pk):
        party = services.get_party(self.party_kind, pk, context=self.operation_context())
        return Response(PartySerializer(party).data)


class PartyVehicleListView(CoreAPIView):
    party_kind = None

    @extend_schema(responses=VehicleSerializer(many=True))
    def get(self, request, pk):
        vehicles = services.list_party_vehicles(self.party_kind, pk, context=self.operation_context())
        return Response(VehicleSerializer(vehicles, many=True).data)


class PartyVehicleCountView(CoreAPIView):
    party_kind = None

    @extend_schema(responses=VehicleCountSerializer)
    def get(self, request, pk):
        result = services.count_active_vehicles(self.party_kind, pk, context=self.operation_context())
        return Response(VehicleCountSerializer(result).data)


class VehicleDeactivateView(CoreAPIView):
    @extend_schema(request=None, responses=VehicleSerializer)
    def patch(self, request, pk):
        vehicle = services.deactivate_vehicle(pk, actor=self.actor(), context=self.operation_context())
        return Response(VehicleSerializer(vehicle).data)


class PolicyListView(CoreAPIView):
    @extend_schema(request=PolicyCreateSerializer, responses={201: PolicySerializer})
    def post(self, request):
        serializer = PolicyCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        policy = services.create_policy(
            created_by=self.actor(),
            vehicle=data['vehicle'],
            policy_no=data['policy_no'],
            valid_from=data['valid_from'],
            valid_to=data['valid_to'],
            status=data['status'],
            context=self.operation_context(),
        )
        return Response(PolicySerializer(policy).data, status=status.HTTP_201_CREATED)


class PolicyDetailView(CoreAPIView):
    @extend_schema(responses=PolicySerializer)
    def get(self, request, pk):
        policy = services.get_policy(pk, context=self.operation_context())
        return Response(PolicySerializer(policy).data)


class StickerListView(CoreAPIView):
    @extend_schema(
        parameters=[
            OpenApiParameter('status', str, enum=StickerStatus.values),
            OpenApiParameter('policy', str),
        ],
        responses=StickerSerializer(many=True),
    )
    def get(self, request):
        stickers = services.list_active_stickers(
            status=request.query_params.get('status'),
            policy_id=request.query_params.get('policy'),
            context=self.operation_context(),
        )
        return Response(StickerSerializer(stickers, many=True).data)

    @extend_schema(request=StickerCreateSerializer, responses={201: StickerSerializer})
    def post(self, request):
        serializer = StickerCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        sticker = services.issue_sticker(
            created_by=self.actor(),
            policy_id=data['policy'],
            sticker_no=data['sticker_no'],
            stock_id=data.get('stock'),
            context=self.operation_context(),
        )
        return Response(StickerSerializer(sticker).data, status=status.HTTP_201_CREATED)


class StickerDetailView(CoreAPIView):
    @extend_schema(responses=StickerSerializer)
    def get(self, request, pk):
        sticker = services.get_sticker(pk, context=self.operation_context())
        return Response(StickerSerializer(sticker).data)

    @extend_schema(responses=StickerSerializer)
    def delete(self, request, pk):
        sticker = services.deactivate_sticker(pk, actor=self.actor(), context=self.operation_context())
        return Response(StickerSerializer(sticker).data)
