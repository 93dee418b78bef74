"""Proposal request email for the mail-client handoff.

Builds a mailto: URL whose body carries the customer's contact details
and the current inputs. Opening the URL is left to the caller.
"""

from dataclasses import dataclass
from urllib.parse import quote

from solar_savings.models.parameters import ParameterSet

PROPOSAL_SUBJECT = "Solar Proposal Request"


@dataclass
class ContactDetails:
    """Lead-capture fields entered by the customer."""

    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""


def _num(value: float) -> str:
    return format(value, "f").rstrip("0").rstrip(".")


def _pct(value: float) -> str:
    return f"{_num(value * 100)}%"


def proposal_body(params: ParameterSet, contact: ContactDetails) -> str:
    """Plain-text email body summarizing contact fields and inputs."""
    return (
        f"Name: {contact.name}\n"
        f"Email: {contact.email}\n"
        f"Phone: {contact.phone}\n"
        f"Address: {contact.address}\n"
        "\n"
        "Inputs:\n"
        f"Usage: {_num(params.usage)} kWh/yr\n"
        f"Utility: ${_num(params.utility_rate)}/kWh @ {_pct(params.utility_esc)}\n"
        f"PPA: ${_num(params.ppa_rate)}/kWh @ {_pct(params.ppa_esc)}\n"
        f"Battery: {'Yes' if params.include_battery else 'No'}\n"
        f"NEM Credit: ${_num(params.net_metering_credit)}/kWh\n"
        f"System Cost: ${_num(params.system_cost)} (ITC {_pct(params.itc)})"
    )


def compose_proposal_email(params: ParameterSet, contact: ContactDetails, to: str = "") -> str:
    """Return a mailto: URL with subject and body percent-encoded.

    Args:
        params: Current inputs.
        contact: Customer contact fields.
        to: Optional recipient address.
    """
    subject = quote(PROPOSAL_SUBJECT, safe="")
    body = quote(proposal_body(params, contact), safe="")
    return f"mailto:{quote(to, safe='@')}?subject={subject}&body={body}"
