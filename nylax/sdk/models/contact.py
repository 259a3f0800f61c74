from .base import APIObject


class Contact(APIObject):
    collection_name = "contacts"
    attrs = (
        "id", "object", "account_id", "given_name", "middle_name", "surname",
        "suffix", "nickname", "birthday", "company_name", "job_title",
        "manager_name", "office_location", "notes", "picture_url", "emails",
        "im_addresses", "physical_addresses", "phone_numbers", "web_pages",
        "groups", "source",
    )
    read_only_attrs = APIObject.read_only_attrs + ("picture_url", "source")

    @property
    def display_name(self) -> str:
        parts = [p for p in (self.given_name, self.surname) if p]
        return " ".join(parts) or self.nickname or ""
