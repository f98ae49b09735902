"""Root-level pytest fixtures for all tests.

Provides:
- A recording httpx transport that replays canned XML responses
- A CanadaPostClient factory wired to that transport
- Sample Canada Post response documents
"""

import httpx
import pytest

from canadapost.services.client import CanadaPostClient

TEST_ENDPOINT = "ct.soa-gw.canadapost.ca"
TEST_CUSTOMER = "0001234567"


# ============================================================================
# HTTP fakes
# ============================================================================


class RecordingTransport(httpx.AsyncBaseTransport):
    """Mock transport that replays canned responses in order.

    Every request is recorded together with its body so tests can assert on
    the URL, headers and XML that were sent.
    """

    def __init__(self, responses: list[tuple[int, str]]):
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []
        self.bodies: list[str] = []

    async def handle_async_request(self, request):
        body = await request.aread()
        self.requests.append(request)
        self.bodies.append(body.decode("utf-8"))
        if not self._responses:
            return httpx.Response(500, text="no canned response left", request=request)
        status, text = self._responses.pop(0)
        return httpx.Response(status, text=text, request=request)


@pytest.fixture
def make_client():
    """Factory returning (client, transport) for a list of canned responses."""

    def _make(responses, customer=TEST_CUSTOMER, lang=None):
        transport = RecordingTransport(responses)
        http_client = httpx.AsyncClient(transport=transport)
        client = CanadaPostClient(
            "user",
            "secret",
            customer=customer,
            lang=lang,
            endpoint=TEST_ENDPOINT,
            http_client=http_client,
        )
        return client, transport

    return _make


# ============================================================================
# Sample responses
# ============================================================================

SERVICES_XML = """<?xml version="1.0" encoding="UTF-8"?>
<services xmlns="http://www.canadapost.ca/ws/ship/rate-v3">
  <service>
    <service-code>USA.EP</service-code>
    <service-name>Expedited Parcel USA</service-name>
    <link rel="service" href="https://ct.soa-gw.canadapost.ca/rs/ship/service/USA.EP?country=US" media-type="application/vnd.cpc.ship.rate-v3+xml"/>
  </service>
  <service>
    <service-code>USA.PW.ENV</service-code>
    <service-name>Priority Worldwide envelope USA</service-name>
    <link rel="service" href="https://ct.soa-gw.canadapost.ca/rs/ship/service/USA.PW.ENV?country=US" media-type="application/vnd.cpc.ship.rate-v3+xml"/>
  </service>
</services>
"""

SINGLE_SERVICE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<services xmlns="http://www.canadapost.ca/ws/ship/rate-v3">
  <service>
    <service-code>DOM.EP</service-code>
    <service-name>Expedited Parcel</service-name>
  </service>
</services>
"""

PRICE_QUOTES_XML = """<?xml version="1.0" encoding="UTF-8"?>
<price-quotes xmlns="http://www.canadapost.ca/ws/ship/rate-v3">
  <price-quote>
    <service-code>DOM.EP</service-code>
    <service-link rel="service" href="https://ct.soa-gw.canadapost.ca/rs/ship/service/DOM.EP" media-type="application/vnd.cpc.ship.rate-v3+xml"/>
    <service-name>Expedited Parcel</service-name>
    <price-details>
      <base>9.59</base>
      <taxes>
        <gst percent="5.000">0.53</gst>
        <pst>0</pst>
        <hst>0</hst>
      </taxes>
      <due>11.08</due>
      <options>
        <option>
          <option-code>DC</option-code>
          <option-name>Delivery confirmation</option-name>
          <option-price>0</option-price>
        </option>
      </options>
      <adjustments>
        <adjustment>
          <adjustment-code>FUELSC</adjustment-code>
          <adjustment-name>Fuel surcharge</adjustment-name>
          <adjustment-cost>0.96</adjustment-cost>
        </adjustment>
        <adjustment>
          <adjustment-code>AUTDISC</adjustment-code>
          <adjustment-name>Automation discount</adjustment-name>
          <adjustment-cost>-0.29</adjustment-cost>
        </adjustment>
      </adjustments>
    </price-details>
    <weight-details/>
    <service-standard>
      <am-delivery>false</am-delivery>
      <guaranteed-delivery>true</guaranteed-delivery>
      <expected-transit-time>1</expected-transit-time>
    </service-standard>
  </price-quote>
</price-quotes>
"""

SHIPMENT_INFO_XML = """<?xml version="1.0" encoding="UTF-8"?>
<non-contract-shipment-info xmlns="http://www.canadapost.ca/ws/ncshipment-v4">
  <shipment-id>340531309186521749</shipment-id>
  <tracking-pin>1234567890123456</tracking-pin>
  <links>
    <link rel="self" href="https://ct.soa-gw.canadapost.ca/rs/0001234567/ncshipment/340531309186521749" media-type="application/vnd.cpc.ncshipment-v4+xml"/>
    <link rel="details" href="https://ct.soa-gw.canadapost.ca/rs/0001234567/ncshipment/340531309186521749/details" media-type="application/vnd.cpc.ncshipment-v4+xml"/>
    <link rel="receipt" href="https://ct.soa-gw.canadapost.ca/rs/0001234567/ncshipment/340531309186521749/receipt" media-type="application/vnd.cpc.ncshipment-v4+xml"/>
    <link rel="refund" href="https://ct.soa-gw.canadapost.ca/rs/0001234567/ncshipment/340531309186521749/refund" media-type="application/vnd.cpc.ncshipment-v4+xml"/>
    <link rel="label" href="https://ct.soa-gw.canadapost.ca/ers/artifact/76108cb5192002d5/10238/1" media-type="application/pdf" index="1"/>
    <link rel="label" href="https://ct.soa-gw.canadapost.ca/ers/artifact/76108cb5192002d5/10238/0" media-type="application/pdf" index="0"/>
  </links>
</non-contract-shipment-info>
"""

REFUND_INFO_XML = """<?xml version="1.0" encoding="UTF-8"?>
<non-contract-shipment-refund-request-info xmlns="http://www.canadapost.ca/ws/ncshipment-v4">
  <service-ticket-date>2026-10-18</service-ticket-date>
  <service-ticket-id>0123456789</service-ticket-id>
</non-contract-shipment-refund-request-info>
"""

SHIPMENTS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<non-contract-shipments xmlns="http://www.canadapost.ca/ws/ncshipment-v4">
  <link rel="shipment" href="https://ct.soa-gw.canadapost.ca/rs/0001234567/ncshipment/340531309186521749" media-type="application/vnd.cpc.ncshipment-v4+xml"/>
  <link rel="shipment" href="https://ct.soa-gw.canadapost.ca/rs/0001234567/ncshipment/392461397138567182" media-type="application/vnd.cpc.ncshipment-v4+xml"/>
</non-contract-shipments>
"""

SHIPMENT_DETAILS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<non-contract-shipment-details xmlns="http://www.canadapost.ca/ws/ncshipment-v4">
  <final-shipping-point>V5C2H2</final-shipping-point>
  <tracking-pin>1234567890123456</tracking-pin>
  <delivery-spec>
    <service-code>DOM.EP</service-code>
    <sender>
      <company>Test Sender</company>
      <contact-phone>555-555-1234</contact-phone>
      <address-details>
        <address-line-1>4809 Albert St.</address-line-1>
        <city>Burnaby</city>
        <prov-state>BC</prov-state>
        <postal-zip-code>V5C2H2</postal-zip-code>
      </address-details>
    </sender>
    <destination>
      <name>Test Recipient</name>
      <address-details>
        <address-line-1>9112 Emerald Dr.</address-line-1>
        <city>Whistler</city>
        <prov-state>BC</prov-state>
        <country-code>CA</country-code>
        <postal-zip-code>V0N1B9</postal-zip-code>
      </address-details>
    </destination>
    <parcel-characteristics>
      <weight>1.000</weight>
    </parcel-characteristics>
  </delivery-spec>
</non-contract-shipment-details>
"""

TRACKING_SUMMARY_XML = """<?xml version="1.0" encoding="UTF-8"?>
<tracking-summary xmlns="http://www.canadapost.ca/ws/track">
  <pin-summary>
    <pin>1681334332936901</pin>
    <origin-postal-id>V6G3E2</origin-postal-id>
    <destination-postal-id>M5V3L9</destination-postal-id>
    <destination-province>ON</destination-province>
    <service-name>Expedited Parcels</service-name>
    <mailed-on-date>2026-10-14</mailed-on-date>
    <expected-delivery-date>2026-10-17</expected-delivery-date>
    <actual-delivery-date>2026-10-16</actual-delivery-date>
    <event-type>DELIVERED</event-type>
    <event-description>Item successfully delivered</event-description>
    <customer-ref-1>order-42</customer-ref-1>
  </pin-summary>
</tracking-summary>
"""

TRACKING_DETAIL_XML = """<?xml version="1.0" encoding="UTF-8"?>
<tracking-detail xmlns="http://www.canadapost.ca/ws/track">
  <pin>1371134583769923</pin>
  <active-exists>1</active-exists>
  <archive-exists/>
  <service-name>Expedited Parcels</service-name>
  <delivery-options>
    <item>
      <delivery-option>CO_SIGNATURE</delivery-option>
      <delivery-option-description>Signature Required</delivery-option-description>
    </item>
    <item>
      <delivery-option>CO_PIN</delivery-option>
    </item>
  </delivery-options>
  <significant-events>
    <occurrence>
      <event-identifier>1496</event-identifier>
      <event-date>2026-10-16</event-date>
      <event-time>11:18:57</event-time>
      <event-time-zone>EDT</event-time-zone>
      <event-description>Item successfully delivered</event-description>
      <signatory-name>JOHN</signatory-name>
      <event-site>TORONTO</event-site>
      <event-province>ON</event-province>
    </occurrence>
  </significant-events>
</tracking-detail>
"""

SINGLE_ERROR_XML = """<?xml version="1.0" encoding="UTF-8"?>
<messages xmlns="http://www.canadapost.ca/ws/messages">
  <message>
    <code>9111</code>
    <description>The destination postal code is invalid.</description>
  </message>
</messages>
"""

MULTIPLE_ERRORS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<messages xmlns="http://www.canadapost.ca/ws/messages">
  <message>
    <code>1</code>
    <description>bad origin</description>
  </message>
  <message>
    <code>2</code>
    <description>bad destination</description>
  </message>
</messages>
"""
