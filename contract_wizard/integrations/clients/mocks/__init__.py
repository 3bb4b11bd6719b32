"""
Mock integration clients.

These clients return fake (but realistic) responses without calling any external API.
They are used when:
- The extraction service or contract API is not configured
- We want to test the wizard end-to-end without external dependencies

Important:
- Mock clients must follow the SAME interface as real HTTP clients
  (contract_wizard/integrations/contracts/interfaces.py).
"""
