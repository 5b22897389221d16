import datetime as dt
import logging

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from networth_core.domain.errors import ConversionError, InvalidArgumentError
from networth_core.io.config import projection_config_from_dict
from networth_core.io.currency import StaticRateConverter
from networth_core.io.serialize import document_to_json, error_payload
from networth_core.services.net_worth import NetWorth

from .serializers import ProjectionQuerySerializer

logger = logging.getLogger(__name__)


def _first_error(errors: dict) -> str:
    for field, messages in errors.items():
        if messages:
            return f"{field}: {messages[0]}"
    return "Invalid request"


class NetWorthProjectionView(APIView):
    """
    GET /net_worth_projections/?timeframes=1,5,10&interval=monthly

    settings.NET_WORTH_SOURCE is a dotted path to a callable taking the request
    and returning the household's BalanceSource.

    settings.NET_WORTH_CONVERTER, when set, is a dotted path to a callable taking
    the request and returning a CurrencyConverter. Otherwise a fixed-rate converter
    is built from settings.NET_WORTH_EXCHANGE_RATES ({"EUR/USD": "1.10", ...}).
    """

    def get_balance_source(self, request):
        factory_path = getattr(settings, "NET_WORTH_SOURCE", None)
        if not factory_path:
            raise ImproperlyConfigured("NET_WORTH_SOURCE must point to a balance source factory")
        return import_string(factory_path)(request)

    def get_converter(self, request):
        factory_path = getattr(settings, "NET_WORTH_CONVERTER", None)
        if factory_path:
            return import_string(factory_path)(request)
        return StaticRateConverter.from_pairs(getattr(settings, "NET_WORTH_EXCHANGE_RATES", {}))

    def get_reference_date(self) -> dt.date:
        return dt.date.today()

    def get_config(self):
        return projection_config_from_dict(getattr(settings, "NET_WORTH_PROJECTION", {}))

    def get(self, request):
        query = ProjectionQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(
                {"error": "invalid_argument", "message": _first_error(query.errors)},
                status=status.HTTP_400_BAD_REQUEST,
            )
        data = query.validated_data

        net_worth = NetWorth(
            self.get_balance_source(request),
            reference_date=self.get_reference_date(),
            config=self.get_config(),
            converter=self.get_converter(request),
        )
        try:
            document = net_worth.projections(timeframes=data.get("timeframes"), interval=data.get("interval"))
        except InvalidArgumentError as exc:
            return Response({"error": "invalid_argument", "message": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except ConversionError as exc:
            logger.warning("Projection refused, missing exchange rate: %s", exc)
            return Response(
                {"error": "currency_conversion", "message": str(exc)},
                status=status.HTTP_422_UNPROCESSABLE_ENTITY,
            )

        if not document.sufficient:
            logger.info("Projection refused: %s", document.message)
            return Response(error_payload(document), status=status.HTTP_422_UNPROCESSABLE_ENTITY)
        return Response(document_to_json(document))
