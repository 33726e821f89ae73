"""
URLs and CSS selectors of the register.it control panel.

These describe the panel's current markup. Any redesign of the panel
requires updating this module.
"""

from dataclasses import dataclass

RECORD_ROWS = "form.dnsTable table.dinamicList tbody tr.rMain"


@dataclass(frozen=True)
class PanelUrls:
    welcome: str = "https://controlpanel.register.it/welcome.html"
    dashboard: str = "https://controlpanel.register.it/"
    domain_overview: str = "https://controlpanel.register.it/firstLevel/view.html?domain={domain}"

    def overview_for(self, domain: str) -> str:
        return self.domain_overview.format(domain=domain)


@dataclass(frozen=True)
class PanelSelectors:
    cookies_reject_button: str = "button.iubenda-cs-reject-btn"

    login_username: str = "form#formLogin input.userName"
    login_password: str = "form#formLogin input.password"
    login_button: str = ".standard-login-module button.btn-primary"

    domain_link: str = "ul.domains-list li a"
    domain_and_dns_link: str = "li#webapp_domain a"
    dns_configuration_link: str = "li#dom_dns a"
    advanced_tab_link: str = "ul.tabbedMenu li.lastChild a"

    record_rows: str = RECORD_ROWS
    record_names: str = f"{RECORD_ROWS} input.recordName"
    record_ttls: str = f"{RECORD_ROWS} input.recordTTL"
    record_types: str = f"{RECORD_ROWS} select.recordType"
    record_values: str = f"{RECORD_ROWS} textarea.recordValue"
    record_row_count: str = ".rMain"

    add_record_button: str = "div.console-buttons a.add"
    modal_apply_link: str = "div#modalDNS a.apply"
    submit_button: str = "div.console-apply a.submit"

    def row(self, record_id: int) -> str:
        """Selector of the table row holding positional id `record_id`."""
        return f"tr[name=recordDNS_{int(record_id) - 1}]"

    def row_name(self, record_id: int) -> str:
        return f"{self.row(record_id)} input.recordName"

    def row_ttl(self, record_id: int) -> str:
        return f"{self.row(record_id)} input.recordTTL"

    def row_type(self, record_id: int) -> str:
        return f"{self.row(record_id)} select.recordType"

    def row_value(self, record_id: int) -> str:
        return f"{self.row(record_id)} textarea.recordValue"

    def row_remove_link(self, record_id: int) -> str:
        return f"{self.row(record_id)} td.col-actions a.recordRemove"
