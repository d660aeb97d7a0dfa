# udr

The data side of a 5G Unified Data Repository: procedures that read,
write, patch and delete subscriber, application and registration data,
keep the in-memory subscription tables, and tell subscribers when data
they watch has changed.

Every procedure returns a `Response` — an HTTP status, an optional body,
optional headers and a cause string — so the procedures can sit behind
any web framework. Errors follow the 3GPP problem-details shape through
`ProblemDetails`.

The package has no dependencies outside the standard library.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## What is inside

- `udr.convert` — `Snssai` with `snssai_from_hex` / `snssai_to_hex`,
  DNN key escaping for document keys (`escape_dnn`, `unescape_dnn`),
  `to_json_bytes`, `to_document` and `contains`.
- `udr.problem` — `ProblemDetails`, `Response`, `problem_response`, and
  the standard problems `system_failure`, `malformed_request_syntax`,
  `not_found`, `modify_not_allowed`, `unspecified` and
  `empty_ue_id_problem`.
- `udr.auth` — `RouterAuthorizationCheck`. Its `check(headers, nf_context)`
  takes the `Authorization` header (matched case-insensitively) and
  passes it to `nf_context.authorization_check(token, service_name)`;
  it returns `None` when that call succeeds and a 401 `Response` with
  `{"error": ...}` when it raises.
- `udr.patch` — JSON Patch items (`PatchItem`, `parse_patch_items`) and
  `apply_patch`, which works on a copy and raises `PatchError` on a bad
  or failing operation.
- `udr.store` — `DocumentStore`, an in-memory, thread-safe store of named
  collections with Mongo-style filters (`matches`: equality, dotted
  paths, `$and`, `$or`, `$exists`, optional case-insensitive strings),
  upsert (`put_one`), merge patch and JSON patch. Failures raise
  `StoreError`.
- `udr.state` — `RepositoryState`, holding EE, SDM, data-change and
  influence-data subscriptions, per-kind id counters starting at `"1"`,
  and `group_uri()` built from scheme, address and port.
- `udr.notify` — building data-change, policy-data and influence-data
  notifications, and `Notifier`, which sends them to the recorded
  subscribers. It posts JSON with `post_json` unless another sender
  callable is given.
- `udr.procedures` — the procedures, one class per resource group, each
  a subclass of `ProcessorBase` (`udr.procedures.base`):
  - `registrations.RegistrationProcedures` — AMF, SMF and SMSF contexts
  - `authentication.AuthenticationProcedures` — authentication
    subscription, SoR and status
  - `session_management.SessionManagementProcedures` — SM data by slice
    and DNN
  - `subscription_data.SubscriptionDataProcedures` — AM, EE, PP, ODB,
    identity, shared, SMF selection, SMS, SMS management, trace and
    operator-specific data
  - `provisioned_data.ProvisionedDataProcedures` — all provisioned data
    sets of a UE at once
  - `ee_subscriptions.EeSubscriptionProcedures` — UE and UE-group EE
    subscriptions and their AMF subscription info
  - `sdm_subscriptions.SdmSubscriptionProcedures`
  - `data_change_subscriptions.DataChangeSubscriptionProcedures`
  - `influence_data.InfluenceDataProcedures` — traffic influence data
    and its subscriptions

Each procedure class takes an optional `DocumentStore`, `RepositoryState`
and `Notifier`, so several classes can share one store and one state.
Notifications run on a background thread unless `run_async=False`.

## Examples

```python
from udr.convert import escape_dnn, snssai_from_hex, snssai_to_hex, unescape_dnn
from udr.problem import not_found

snssai = snssai_from_hex("01010203")
assert snssai.sst == 1 and snssai.sd == "010203"
assert snssai_to_hex(snssai) == "01010203"

# Dots are not allowed in document keys, so DNNs are stored escaped.
assert escape_dnn("internet.example") == "internet_example"
assert unescape_dnn("internet_example") == "internet.example"

pd = not_found("USER_NOT_FOUND")
assert pd.status == 404
assert pd.title == "User not found"
```

Sharing one store between procedure groups:

```python
from udr.procedures.registrations import RegistrationProcedures
from udr.state import RepositoryState
from udr.store import DocumentStore

store = DocumentStore()
state = RepositoryState()
regs = RegistrationProcedures(store, state, run_async=False)

coll = "subscriptionData.contextData.smsf3gppAccess"
ue_id = "imsi-001010000000001"

assert regs.create_smsf_context_3gpp(coll, ue_id, {"smsfInstanceId": "smsf-1"}).status == 204
response = regs.query_smsf_context_3gpp(coll, ue_id)
assert response.status == 200
assert response.body == {"ueId": ue_id, "smsfInstanceId": "smsf-1"}
```

## What it does not do

- It runs no HTTP server and has no router; the procedures are plain
  method calls returning `Response` values.
- Storage is the in-memory `DocumentStore`; nothing is written to disk
  or to a database, and nothing survives the process.
- There are no policy-data procedures (PFDs, BDT data, UE policy sets,
  SM policy data, usage monitoring, policy-data subscriptions), and no
  single object that gathers all procedure groups together.
- There is no configuration file loading, no NF registration with a
  repository function, and no command-line program.