"""
Step definitions for register.it DNS record management scenarios.
"""

import parse
from behave import given, register_type, then, when

from registerit_dns.core.models import DnsRecord
from registerit_dns.errors import RegisterItError
from registerit_dns.providers.mock_provider import MockDNSProvider


@parse.with_pattern(r'[^"]*')
def parse_text(text):
    return text


register_type(Text=parse_text)


def get_provider(context):
    """Build the provider on first use so Given steps can shape the panel."""
    if getattr(context, "provider", None) is None:
        config = dict(context.test_config["dns_providers"]["mock"])
        config.update(
            records=context.records,
            failed_logins=context.failed_logins,
            max_login_attempts=context.max_login_attempts,
        )
        context.provider = MockDNSProvider(config)
    return context.provider


def run(context, operation):
    """Run an operation, keeping any panel error for the Then steps."""
    try:
        context.result = operation(get_provider(context))
    except RegisterItError as e:
        context.error = e


@given('the control panel is simulated for domain "{domain}"')
def step_impl(context, domain):
    context.test_config["dns_providers"]["mock"]["domain"] = domain
    context.provider = None
    context.failed_logins = 0
    context.max_login_attempts = 10


@given("the record table contains")
def step_impl(context):
    context.records = [
        {"name": row["name"], "ttl": row["ttl"], "type": row["type"], "value": row["value"]}
        for row in context.table
    ]


@given("the record table is empty")
def step_impl(context):
    context.records = []


@given("the control panel rejects every login")
def step_impl(context):
    context.failed_logins = None


@given("the control panel rejects the first {count:d} logins")
def step_impl(context, count):
    context.failed_logins = count


@given("the login attempts are limited to {count:d}")
def step_impl(context, count):
    context.max_login_attempts = count


@when("I list the DNS records")
def step_impl(context):
    run(context, lambda provider: provider.list_records())
    if context.error is None:
        context.listed = context.result


@when('I create the record "{name:Text}" {ttl:d} "{record_type:Text}" "{value:Text}"')
def step_impl(context, name, ttl, record_type, value):
    record = DnsRecord(name=name, ttl=ttl, type=record_type, value=value)
    run(context, lambda provider: provider.create_record(record))
    context.created = context.result


@when('I update record {record_id:d} to "{name:Text}" {ttl:d} "{record_type:Text}" "{value:Text}"')
def step_impl(context, record_id, name, ttl, record_type, value):
    record = DnsRecord(name=name, ttl=ttl, type=record_type, value=value)
    run(context, lambda provider: provider.update_record(record_id, record))


@when("I update record {record_id:d}")
def step_impl(context, record_id):
    record = DnsRecord(name="www", ttl=60, type="A", value="192.0.2.1")
    run(context, lambda provider: provider.update_record(record_id, record))


@when("I delete record {record_id:d}")
def step_impl(context, record_id):
    run(context, lambda provider: provider.delete_record(record_id))


@then("I should see {count:d} records with ids 1 to {last:d}")
def step_impl(context, count, last):
    assert context.error is None, f"Listing failed: {context.error}"
    assert len(context.listed) == count
    assert [record.id for record in context.listed] == list(range(1, last + 1))


@then("the created record should have id {record_id:d}")
def step_impl(context, record_id):
    assert context.error is None, f"Create failed: {context.error}"
    assert context.created.id == record_id


@then("listing the records should return exactly {count:d} record")
@then("listing the records should return exactly {count:d} records")
def step_impl(context, count):
    context.listed = get_provider(context).list_records()
    assert len(context.listed) == count, f"Expected {count} records, got {len(context.listed)}"


@then('record {record_id:d} should be "{name:Text}" {ttl:d} "{record_type:Text}" "{value:Text}"')
def step_impl(context, record_id, name, ttl, record_type, value):
    assert context.error is None, f"Operation failed: {context.error}"
    records = get_provider(context).list_records()
    record = records[record_id - 1]
    assert record.id == record_id
    assert record.to_record() == DnsRecord(name=name, ttl=ttl, type=record_type, value=value), record


@then("the changes should have been committed once")
def step_impl(context):
    assert get_provider(context).page.commits == 1


@then("nothing should have been committed")
def step_impl(context):
    assert get_provider(context).page.commits == 0


@then('the operation should fail with "{message}"')
def step_impl(context, message):
    assert context.error is not None, "Operation should have failed"
    assert message in str(context.error), f"Unexpected error: {context.error}"


@then("the operation should succeed")
def step_impl(context):
    assert context.error is None, f"Operation failed: {context.error}"


@then("the credentials should have been submitted {count:d} times")
def step_impl(context, count):
    page = get_provider(context).page
    assert page.submitted_credentials == [("mock", "mock")] * count, page.submitted_credentials
