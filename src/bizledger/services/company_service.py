from __future__ import annotations

import logging

from bizledger.domain.errors import ValidationError
from bizledger.domain.models import THEMES, CompanyProfile, NotificationKind
from bizledger.domain.validation import optional_text, require_text
from bizledger.services.notification_service import reports_failures

log = logging.getLogger(__name__)


def default_company_profile(company_name: str = "BizLedger") -> CompanyProfile:
    return CompanyProfile(
        company_name=company_name,
        address="123 Business Rd, Dhaka",
        phone="01xxxxxxxxx",
        email="contact@example.com",
        logo=None,
    )


class CompanyService:
    def __init__(self, repo, notifier):
        self.repo = repo
        self.notifier = notifier

    def get_profile(self) -> CompanyProfile:
        return self.repo.company_profile or self.repo.default_profile

    @reports_failures
    def update_profile(self, profile: CompanyProfile) -> CompanyProfile:
        """Replace the profile wholesale; fields left out are not carried over."""
        cleaned = CompanyProfile(
            company_name=require_text(profile.company_name, "Company name"),
            address=(profile.address or "").strip(),
            phone=(profile.phone or "").strip(),
            email=(profile.email or "").strip(),
            logo=optional_text(profile.logo),
        )
        self.repo.commit(company_profile=cleaned)
        log.info("company_profile_updated name=%s", cleaned.company_name)
        self.notifier.show("Company profile updated.", NotificationKind.SUCCESS)
        return cleaned

    def get_theme(self) -> str:
        return self.repo.theme

    @reports_failures
    def set_theme(self, theme: str) -> str:
        if theme not in THEMES:
            raise ValidationError(f"Theme must be one of: {', '.join(THEMES)}.")
        self.repo.commit(theme=theme)
        return theme
