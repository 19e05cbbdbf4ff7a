import sys

from secconf_guard import JsonFileAdapter, Operation, PasswordPolicyConfig, SecurityConfigStore
from secconf_guard.capabilities import PASSWORD_VALIDATOR

if __name__ == "__main__":
    path = sys.argv[1] if len(sys.argv) > 1 else "security.json"
    store = SecurityConfigStore(persistance_adapter=JsonFileAdapter(path))

    candidate = PasswordPolicyConfig("strict", PASSWORD_VALIDATOR, min_length=12, max_length=8)
    issue = store.validator.check(Operation.ADD, store.snapshot(), candidate)
    if issue is not None:
        print("Not saving:", issue.message)
        candidate = PasswordPolicyConfig("strict", PASSWORD_VALIDATOR, min_length=12)

    if "strict" not in store.names(candidate.kind):
        store.add(candidate, modified_by="cli", reason="Tighten passwords")
    print("Stored policies:", store.names(candidate.kind))
