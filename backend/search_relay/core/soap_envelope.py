"""SOAP Envelope Builder: PersonSearch request body from a SearchQuery.

Invariants:
    - Every interpolated value (caller text AND credentials) is escaped for & < > " '
    - No other sanitization: caller text becomes literal element content
    - Pure: same query + credentials → byte-identical output, no IO, cannot fail
    - Page size, start record and purpose codes are fixed, never per request
"""

from xml.sax.saxutils import escape

from search_relay.core.domain_types import OutboundCredentials, SearchQuery

DPPA_PURPOSE = 0
GLB_PURPOSE = 0
NUMBER_OF_RECORDS = 25
STARTING_RECORD = 1

_QUOTE_ENTITIES = {'"': "&quot;", "'": "&apos;"}

_TEMPLATE = """<?xml version="1.0" encoding="utf-8"?>
<soapenv:Envelope xmlns:soapenv="http://schemas.xmlsoap.org/soap/envelope/" xmlns:tlo="http://tlo.com/">
  <soapenv:Header/>
  <soapenv:Body>
    <tlo:PersonSearch>
      <tlo:genericSearchInput>
        <tlo:Username>{username}</tlo:Username>
        <tlo:Password>{password}</tlo:Password>
        <tlo:DPPAPurpose>{dppa}</tlo:DPPAPurpose>
        <tlo:GLBPurpose>{glb}</tlo:GLBPurpose>
        <tlo:NumberOfRecords>{page_size}</tlo:NumberOfRecords>
        <tlo:StartingRecord>{start}</tlo:StartingRecord>
        <tlo:Name>
          <tlo:FirstName>{first_name}</tlo:FirstName>
          <tlo:LastName>{last_name}</tlo:LastName>
        </tlo:Name>
        <tlo:SSN>{ssn}</tlo:SSN>
      </tlo:genericSearchInput>
    </tlo:PersonSearch>
  </soapenv:Body>
</soapenv:Envelope>"""


def xml_escape(value: str) -> str:
    """Escape the five reserved XML characters."""
    return escape(str(value), _QUOTE_ENTITIES)


def build_person_search_envelope(
    query: SearchQuery, credentials: OutboundCredentials,
) -> bytes:
    """Build the UTF-8 encoded PersonSearch SOAP request."""
    return _TEMPLATE.format(
        username=xml_escape(credentials.username),
        password=xml_escape(credentials.password),
        dppa=DPPA_PURPOSE,
        glb=GLB_PURPOSE,
        page_size=NUMBER_OF_RECORDS,
        start=STARTING_RECORD,
        first_name=xml_escape(query.first_name),
        last_name=xml_escape(query.last_name),
        ssn=xml_escape(query.ssn),
    ).encode("utf-8")
