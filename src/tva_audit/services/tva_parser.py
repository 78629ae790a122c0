"""TVA Parser - maps a TVA metadata document onto the schedule model.

Responsible for:
- Locating TVAMain / ProgramDescription and its two tables
- Enforcing "exactly one" cardinality on every required element
- Extracting services, the single schedule and its events
- Reporting shape violations as MalformedDocument
"""

import logging
import xml.etree.ElementTree as ET
from datetime import datetime

from tva_audit.config import TVA_2010_NAMESPACE
from tva_audit.errors import MalformedDocument
from tva_audit.models import ParsedDocument, Schedule, ScheduleEvent, ServiceInfo
from tva_audit.utils.time_utils import parse_timestamp

logger = logging.getLogger(__name__)


def local_name(tag: str) -> str:
    """Strip the "{namespace}" prefix from an ElementTree tag."""
    return tag.rsplit("}", 1)[-1]


def find_required_single(parent: ET.Element, tag: str) -> ET.Element:
    """Return the only child of parent with the given qualified tag.

    Raises:
        MalformedDocument: If there are zero or several such children
    """
    found = parent.findall(tag)
    if len(found) != 1:
        raise MalformedDocument(
            f"Expected exactly one element {local_name(tag)} below "
            f"{local_name(parent.tag)}; {len(found)} found."
        )
    return found[0]


def required_attribute(elem: ET.Element, name: str) -> str:
    """Return an unqualified attribute value, failing if it is absent."""
    value = elem.get(name)
    if value is None:
        raise MalformedDocument(
            f"Expected exactly one attribute {name} in {local_name(elem.tag)}; 0 found."
        )
    return value


class TvaParser:
    """Parses TVA 2010 program descriptions with a single schedule."""

    def __init__(self, namespace: str = TVA_2010_NAMESPACE):
        """Initialize the parser.

        Args:
            namespace: XML namespace of the TVA metadata elements
        """
        self.namespace = namespace

    def _tag(self, name: str) -> str:
        return f"{{{self.namespace}}}{name}"

    def parse_bytes(self, content: bytes) -> ParsedDocument:
        """Parse raw XML content.

        XML syntax errors are raised as ET.ParseError, unwrapped.
        """
        return self.parse(ET.fromstring(content))

    def parse(self, root: ET.Element) -> ParsedDocument:
        """Parse a document root element.

        Args:
            root: Root element, expected to be TVAMain

        Returns:
            ParsedDocument with the schedule and all services

        Raises:
            MalformedDocument: On any missing, duplicated or unparsable field
        """
        if root.tag != self._tag("TVAMain"):
            raise MalformedDocument("Expected exactly one element TVAMain in document; 0 found.")

        description = find_required_single(root, self._tag("ProgramDescription"))

        schedule = self._parse_location_table(
            find_required_single(description, self._tag("ProgramLocationTable"))
        )
        services = self._parse_service_table(
            find_required_single(description, self._tag("ServiceInformationTable"))
        )

        logger.debug(
            "Parsed schedule for %s with %d events and %d services",
            schedule.service_id, len(schedule.events), len(services),
        )
        return ParsedDocument(schedule=schedule, services=services)

    def _parse_service_table(self, table: ET.Element) -> list[ServiceInfo]:
        services = []
        for elem in table.findall(self._tag("ServiceInformation")):
            service_id = required_attribute(elem, "serviceId")
            names = [(n.text or "") for n in elem.findall(self._tag("Name"))]
            if not names:
                raise MalformedDocument(
                    "Expected at least one element Name below ServiceInformation; 0 found."
                )
            services.append(ServiceInfo(service_id=service_id, names=names))
        return services

    def _parse_location_table(self, table: ET.Element) -> Schedule:
        # One service per file: a second Schedule is a shape error
        elem = find_required_single(table, self._tag("Schedule"))
        return Schedule(
            service_id=required_attribute(elem, "serviceIDRef"),
            start_time=self._attribute_time(elem, "start"),
            end_time=self._attribute_time(elem, "end"),
            events=[self._parse_event(e) for e in elem.findall(self._tag("ScheduleEvent"))],
        )

    def _parse_event(self, elem: ET.Element) -> ScheduleEvent:
        program = find_required_single(elem, self._tag("Program"))
        return ScheduleEvent(
            program_id=required_attribute(program, "crid"),
            start_time=self._element_time(elem, "PublishedStartTime"),
            end_time=self._element_time(elem, "PublishedEndTime"),
        )

    def _element_time(self, parent: ET.Element, name: str) -> datetime:
        elem = find_required_single(parent, self._tag(name))
        return _as_datetime(elem.text or "", name)

    def _attribute_time(self, elem: ET.Element, name: str) -> datetime:
        return _as_datetime(required_attribute(elem, name), f"{local_name(elem.tag)}@{name}")


def _as_datetime(value: str, where: str) -> datetime:
    try:
        return parse_timestamp(value)
    except ValueError as e:
        raise MalformedDocument(f"Invalid timestamp '{value}' in {where}.") from e
