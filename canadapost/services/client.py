"""Async Canada Post web services client.

Translates method calls into XML-over-HTTP requests against the Canada Post
REST services and normalizes the XML responses into camelCase dicts and
lists.

Example:
    client = CanadaPostClient("user", "password", customer="0001234567",
                              endpoint=DEVELOPMENT_ENDPOINT)
    services = await client.discover_services("V6G3E2", "US")
    shipment = await client.create_non_contract_shipment({...})
    label_url = shipment["links"]["label"]
"""

import base64
import logging
from collections.abc import Mapping
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

import httpx

from canadapost.errors.domain import CanadaPostUsageError, ResultFormatError
from canadapost.errors.translation import (
    check_result_format,
    raise_for_carrier_error,
    snapshot,
    translate_error_response,
)
from canadapost.services.constants import (
    DEFAULT_LANGUAGE,
    DETAIL_TRACKING_TYPES,
    NCSHIPMENT_MEDIA_TYPE,
    NCSHIPMENT_NAMESPACE,
    PRODUCTION_ENDPOINT,
    RATE_MEDIA_TYPE,
    RATE_NAMESPACE,
    RATE_PATH,
    SUMMARY_TRACKING_TYPES,
    TRACK_MEDIA_TYPE,
    TRACK_PATH,
    TrackingType,
)
from canadapost.services.links import extract_links, parse_shipment_link
from canadapost.services.models import RequestDescriptor
from canadapost.services.paths import compose_url, format_date, validate_method
from canadapost.utils.redaction import redact_for_logging
from canadapost.wire.codec import Element, build_xml, parse_xml
from canadapost.wire.normalizer import (
    CAMEL,
    KEBAB,
    children_of,
    ensure_list,
    normalize_object,
)

if TYPE_CHECKING:
    from canadapost.config import CanadaPostConfig

logger = logging.getLogger(__name__)


def set_namespace(payload: Mapping[str, Any], xmlns: str) -> Element:
    """Wrap a payload so its root element carries an ``xmlns`` attribute.

    Args:
        payload: Root element content (not mutated).
        xmlns: Namespace URI required by the service schema.

    Returns:
        Element with the namespace attribute and a copy of the payload.
    """
    if isinstance(payload, Element):
        return Element(
            attributes={**payload.attributes, "xmlns": xmlns},
            text=payload.text,
            children=dict(payload.children),
        )
    return Element(attributes={"xmlns": xmlns}, children=dict(payload))


class CanadaPostClient:
    """Async client for the Canada Post REST/XML web services.

    Holds static configuration only; every call builds its own request and
    performs a single round trip (``refund_non_contract_shipment`` performs
    two, in sequence). Nothing is retried or cached.

    Attributes:
        endpoint: Host name requests are sent to.
        auth: Base64-encoded ``user:password`` for HTTP Basic.
        customer: Customer number, used in ``/rs/{customer}/...`` paths.
        lang: Accept-Language tag.
    """

    def __init__(
        self,
        user_id: str,
        password: str,
        customer: str | None = None,
        lang: str | None = None,
        *,
        endpoint: str = PRODUCTION_ENDPOINT,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = 30.0,
    ) -> None:
        """Initialize client.

        Args:
            user_id: API user id.
            password: API password.
            customer: Customer number (mailed-by customer).
            lang: Accept-Language tag, ``en-CA`` by default.
            endpoint: Host name; pass DEVELOPMENT_ENDPOINT for the test
                environment.
            http_client: Transport to use. When None, a short-lived
                ``httpx.AsyncClient`` is opened per request.
            timeout: Timeout handed to the short-lived transport.
        """
        self.endpoint = endpoint
        self.auth = base64.b64encode(f"{user_id}:{password}".encode("utf-8")).decode("ascii")
        self.customer = customer
        self.lang = lang or DEFAULT_LANGUAGE
        self._http_client = http_client
        self._timeout = timeout

    @classmethod
    def from_config(
        cls,
        config: "CanadaPostConfig",
        http_client: httpx.AsyncClient | None = None,
    ) -> "CanadaPostClient":
        """Build a client from a loaded CanadaPostConfig."""
        return cls(
            config.user_id,
            config.password,
            customer=config.customer_number,
            lang=config.language,
            endpoint=config.endpoint_host,
            http_client=http_client,
            timeout=config.timeout,
        )

    # ── Request pipeline ───────────────────────────────────────────────

    async def _request(self, descriptor: RequestDescriptor) -> Any:
        """Execute one call and return the raw Wire Tree.

        Args:
            descriptor: Call to execute.

        Returns:
            Parsed response (``{root_tag: node}``), or None for an empty body.

        Raises:
            CanadaPostUsageError: If the method name is not supported.
            CanadaPostError: If the carrier reported an error.
            httpx.HTTPError: On transport failure without a carrier error.
        """
        method = validate_method(descriptor.method)
        query = descriptor.params if method == "GET" else None
        url = compose_url(
            self.endpoint,
            descriptor.call,
            path=descriptor.path,
            customer=self.customer,
            query=query,
        )

        body = None
        if descriptor.params and method != "GET":
            body = build_xml(normalize_object(descriptor.params, KEBAB))

        return await self._raw_request(method, url, descriptor.content_type, body)

    async def _raw_request(
        self,
        method: str,
        url: str,
        content_type: str,
        body: str | None = None,
    ) -> Any:
        """Send a request to an absolute URL and parse the XML response.

        Used directly for links returned by the carrier (e.g. refunds).
        """
        method = validate_method(method)
        headers = {
            "Accept": content_type,
            "Content-Type": content_type,
            "Authorization": f"Basic {self.auth}",
            "Accept-Language": self.lang,
        }
        logger.debug(
            "Canada Post request: %s %s headers=%s",
            method, url, redact_for_logging(headers),
        )

        try:
            response = await self._send(method, url, headers, body)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            translate_error_response(e)

        tree = parse_xml(response.content)
        raise_for_carrier_error(tree)
        return tree

    async def _send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: str | None,
    ) -> httpx.Response:
        content = body.encode("utf-8") if body is not None else None
        if self._http_client is not None:
            return await self._http_client.request(method, url, headers=headers, content=content)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.request(method, url, headers=headers, content=content)

    # ── Rating ─────────────────────────────────────────────────────────

    async def discover_services(
        self,
        origin_postal_code: str,
        destination_country: str,
        destination_postal_code: str | None = None,
    ) -> list[dict[str, Any]]:
        """List the services available between an origin and a destination.

        Args:
            origin_postal_code: Canadian origin postal code.
            destination_country: ISO country code of the destination.
            destination_postal_code: Destination postal/zip code, optional.

        Returns:
            ``[{"serviceCode": ..., "serviceName": ...}]``
        """
        params = {
            "origpc": origin_postal_code,
            "country": destination_country,
        }
        if destination_postal_code:
            params["destpc"] = destination_postal_code

        raw = await self._request(RequestDescriptor(
            call="service",
            content_type=RATE_MEDIA_TYPE,
            params=params,
            path=RATE_PATH,
        ))
        result = normalize_object(raw, CAMEL, drop_attributes=True)
        check_result_format(result, "services")

        services = ensure_list(children_of(result["services"]).get("service"))
        return [
            {
                "serviceCode": children_of(service).get("serviceCode"),
                "serviceName": children_of(service).get("serviceName"),
            }
            for service in services
        ]

    async def get_rates(self, scenario: Mapping[str, Any]) -> list[dict[str, Any]]:
        """Quote prices for a mailing scenario.

        Args:
            scenario: camelCase mailing scenario, e.g. ``{"originPostalCode":
                "V5C2H2", "parcelCharacteristics": {"weight": 1},
                "destination": {"domestic": {"postalCode": "V0N1B6"}}}``.
                ``customerNumber`` is filled in from the client when set.

        Returns:
            One dict per price quote, with ``priceDetails.adjustments`` and
            ``priceDetails.options`` as lists.
        """
        scenario = dict(scenario)
        if self.customer:
            scenario["customerNumber"] = self.customer

        raw = await self._request(RequestDescriptor(
            call="price",
            content_type=RATE_MEDIA_TYPE,
            params={"mailingScenario": set_namespace(scenario, RATE_NAMESPACE)},
            path=RATE_PATH,
            method="POST",
        ))
        result = normalize_object(raw, CAMEL, drop_attributes=True)
        quotes = ensure_list(check_result_format(result, "priceQuotes.priceQuote"))
        return [self._reshape_price_quote(quote) for quote in quotes]

    @staticmethod
    def _reshape_price_quote(quote: Mapping[str, Any]) -> dict[str, Any]:
        reshaped = {key: value for key, value in quote.items() if key != "serviceLink"}
        details = dict(children_of(reshaped.get("priceDetails")))
        if details:
            details["adjustments"] = ensure_list(
                children_of(details.get("adjustments")).get("adjustment")
            )
            details["options"] = ensure_list(
                children_of(details.get("options")).get("option")
            )
            reshaped["priceDetails"] = details
        return reshaped

    # ── Non-contract shipping ──────────────────────────────────────────

    async def create_non_contract_shipment(self, shipment: Mapping[str, Any]) -> dict[str, Any]:
        """Create a non-contract shipment.

        Args:
            shipment: camelCase shipment (``requestedShippingPoint``,
                ``deliverySpec``...).

        Returns:
            ``{"shipmentId", "trackingPin", "links"}`` with links keyed by
            relation.
        """
        raw = await self._request(RequestDescriptor(
            call="ncshipment",
            content_type=NCSHIPMENT_MEDIA_TYPE,
            params={"nonContractShipment": set_namespace(shipment, NCSHIPMENT_NAMESPACE)},
            method="POST",
        ))
        shipment_info = self._shipment_info(raw)
        logger.info("Created non-contract shipment %s", shipment_info["shipmentId"])
        return shipment_info

    async def refund_non_contract_shipment(self, shipment_id: str, email: str) -> dict[str, Any]:
        """Request a refund for a non-contract shipment.

        Fetches the shipment to discover its ``refund`` link, then posts the
        refund request to that link.

        Args:
            shipment_id: Shipment id returned at creation.
            email: Address Canada Post sends the refund confirmation to.

        Returns:
            ``{"serviceTicketId", "serviceTicketDate"}``

        Raises:
            ResultFormatError: If the shipment has no refund link.
        """
        shipment = await self.get_shipment(shipment_id)
        refund_url = shipment["links"].get("refund")
        if not refund_url:
            raise ResultFormatError(expected_path="links.refund", actual=snapshot(shipment))

        body = build_xml(normalize_object(
            {"nonContractShipmentRefundRequest": set_namespace({"email": email}, NCSHIPMENT_NAMESPACE)},
            KEBAB,
        ))
        raw = await self._raw_request("POST", refund_url, NCSHIPMENT_MEDIA_TYPE, body)
        result = normalize_object(raw, CAMEL, drop_attributes=True)
        info = children_of(check_result_format(result, "nonContractShipmentRefundRequestInfo"))

        logger.info("Requested refund for shipment %s", shipment_id)
        return {
            "serviceTicketId": info.get("serviceTicketId"),
            "serviceTicketDate": info.get("serviceTicketDate"),
        }

    async def get_shipments(
        self,
        start: datetime | date,
        end: datetime | date | None = None,
    ) -> list[dict[str, Any]]:
        """List non-contract shipments created in a date range.

        Args:
            start: Range start.
            end: Range end, optional (defaults to now on the carrier side).

        Returns:
            ``[{"shipmentId", "href", "mediaType", "rel"}]``
        """
        params = {"from": format_date(start)}
        if end is not None:
            params["to"] = format_date(end)

        raw = await self._request(RequestDescriptor(
            call="ncshipment",
            content_type=NCSHIPMENT_MEDIA_TYPE,
            params=params,
        ))
        result = normalize_object(raw, CAMEL)
        # An empty list comes back as a bare root element
        if "nonContractShipments" not in children_of(result):
            raise ResultFormatError(expected_path="nonContractShipments", actual=snapshot(result))
        shipments = children_of(result)["nonContractShipments"]

        references = []
        for link in ensure_list(children_of(shipments).get("link")):
            reference = parse_shipment_link(link)
            if reference is not None:
                references.append(reference)
        return references

    async def get_shipment(self, shipment_id: str) -> dict[str, Any]:
        """Fetch a shipment's id, tracking pin and links."""
        raw = await self._request(RequestDescriptor(
            call=f"ncshipment/{shipment_id}",
            content_type=NCSHIPMENT_MEDIA_TYPE,
        ))
        return self._shipment_info(raw)

    async def get_shipment_details(self, shipment_id: str) -> dict[str, Any]:
        """Fetch the full details document of a shipment."""
        raw = await self._request(RequestDescriptor(
            call=f"ncshipment/{shipment_id}/details",
            content_type=NCSHIPMENT_MEDIA_TYPE,
        ))
        result = normalize_object(raw, CAMEL, drop_attributes=True)
        check_result_format(result, "nonContractShipmentDetails")
        return result

    @staticmethod
    def _shipment_info(raw: Any) -> dict[str, Any]:
        result = normalize_object(raw, CAMEL)
        info = children_of(check_result_format(result, "nonContractShipmentInfo"))
        links = children_of(info.get("links")).get("link")
        return {
            "shipmentId": info.get("shipmentId"),
            "trackingPin": info.get("trackingPin"),
            "links": extract_links(links),
        }

    # ── Tracking ───────────────────────────────────────────────────────

    async def get_tracking_summary(
        self,
        pin: str | Mapping[str, Any],
        tracking_type: str = TrackingType.PIN.value,
    ) -> Any:
        """Fetch the tracking summary of a parcel.

        Args:
            pin: PIN or DNC number; for ``tracking_type="ref"``, a mapping of
                reference query parameters (``referenceNumber``,
                ``destinationPostalCode``, ``mailingDateFrom``...).
            tracking_type: ``"pin"``, ``"ref"`` or ``"dnc"``.

        Returns:
            The pin summary dict, or a list of them for reference lookups.

        Raises:
            CanadaPostUsageError: If ``tracking_type`` is not supported.
        """
        if tracking_type not in SUMMARY_TRACKING_TYPES:
            raise CanadaPostUsageError(
                "Unknown tracking format. Should be one of pin, ref, dnc"
            )
        tracking_type = TrackingType(tracking_type).value

        if tracking_type == TrackingType.REFERENCE.value:
            if not isinstance(pin, Mapping):
                raise CanadaPostUsageError(
                    "Reference tracking expects a mapping of query parameters"
                )
            descriptor = RequestDescriptor(
                call=f"{tracking_type}/summary",
                content_type=TRACK_MEDIA_TYPE,
                params=pin,
                path=TRACK_PATH,
            )
        else:
            descriptor = RequestDescriptor(
                call=f"{tracking_type}/{pin}/summary",
                content_type=TRACK_MEDIA_TYPE,
                path=TRACK_PATH,
            )

        raw = await self._request(descriptor)
        result = normalize_object(raw, CAMEL, drop_attributes=True)
        summary = check_result_format(result, "trackingSummary.pinSummary")
        if tracking_type == TrackingType.REFERENCE.value:
            return ensure_list(summary)
        return summary

    async def get_tracking_detail(
        self,
        pin: str,
        tracking_type: str = TrackingType.PIN.value,
    ) -> dict[str, Any]:
        """Fetch the tracking detail (events, delivery options) of a parcel.

        Args:
            pin: PIN or DNC number.
            tracking_type: ``"pin"`` or ``"dnc"``.

        Returns:
            Tracking detail with ``deliveryOptions`` as ``[{option,
            description}]`` and ``significantEvents`` as a list of
            occurrences.

        Raises:
            CanadaPostUsageError: If ``tracking_type`` is not supported.
        """
        if tracking_type not in DETAIL_TRACKING_TYPES:
            raise CanadaPostUsageError("Unknown tracking format. Should be one of pin, dnc")
        tracking_type = TrackingType(tracking_type).value

        raw = await self._request(RequestDescriptor(
            call=f"{tracking_type}/{pin}/detail",
            content_type=TRACK_MEDIA_TYPE,
            path=TRACK_PATH,
        ))
        result = normalize_object(raw, CAMEL, drop_attributes=True)
        detail = dict(children_of(check_result_format(result, "trackingDetail")))

        if "deliveryOptions" in detail:
            items = ensure_list(children_of(detail["deliveryOptions"]).get("item"))
            detail["deliveryOptions"] = [
                {
                    "option": children_of(item)["deliveryOption"],
                    "description": children_of(item)["deliveryOptionDescription"],
                }
                for item in items
                if children_of(item).get("deliveryOption")
                and children_of(item).get("deliveryOptionDescription")
            ]
        if "significantEvents" in detail:
            detail["significantEvents"] = ensure_list(
                children_of(detail["significantEvents"]).get("occurrence")
            )
        return detail
