import json

import httpx
import pytest

from contract_wizard import factory
from contract_wizard.integrations.clients.mocks.contracts import MockContractsClient
from contract_wizard.integrations.clients.mocks.extraction import MockExtractionClient
from contract_wizard.integrations.clients.real_http.contracts import RealContractsClient
from contract_wizard.integrations.clients.real_http.extraction import RealExtractionClient
from contract_wizard.integrations.contracts.interfaces import ContractSubmissionError, ExtractionError
from contract_wizard.utils.config_loader import WizardConfig
from contract_wizard.wizard.session import ContractWizardSession


def _patch_transport(monkeypatch, handler):
    real_client = httpx.AsyncClient
    requests = []

    def recording(request):
        requests.append(request)
        return handler(request)

    def client_factory(**kwargs):
        return real_client(transport=httpx.MockTransport(recording), **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", client_factory)
    return requests


@pytest.mark.asyncio
async def test_real_contracts_client_posts_draft(monkeypatch):
    requests = _patch_transport(
        monkeypatch, lambda request: httpx.Response(200, json={"success": True, "contract": {"id": "c-1"}})
    )
    client = RealContractsClient(base_url="https://api.example.com/", api_key="secret")

    created = await client.create_contract({"contract": {"contract_name": "X"}, "allocations": []})

    assert created.contract_id == "c-1"
    sent = requests[0]
    assert str(sent.url) == "https://api.example.com/contracts"
    assert sent.headers["Authorization"] == "Bearer secret"
    assert json.loads(sent.content)["contract"]["contract_name"] == "X"


@pytest.mark.asyncio
async def test_real_contracts_client_surfaces_error_text(monkeypatch):
    _patch_transport(monkeypatch, lambda request: httpx.Response(400, json={"error": "Missing required contract fields"}))
    client = RealContractsClient(base_url="https://api.example.com")

    with pytest.raises(ContractSubmissionError) as exc:
        await client.create_contract({})
    assert exc.value.message == "Missing required contract fields"
    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_real_contracts_client_requires_url(monkeypatch):
    monkeypatch.delenv("CONTRACTS_API_URL", raising=False)
    with pytest.raises(ValueError):
        await RealContractsClient().create_contract({})


@pytest.mark.asyncio
async def test_real_extraction_client_uploads_file(monkeypatch, tmp_path):
    pdf = tmp_path / "hotel.pdf"
    pdf.write_bytes(b"%PDF-1.4")
    requests = _patch_transport(
        monkeypatch,
        lambda request: httpx.Response(
            200,
            json={
                "success": True,
                "confidence": 85,
                "extracted": {"contract_number": "GH-1"},
                "warnings": [],
                "document_url": "/uploads/contracts/hotel.pdf",
                "document_name": "hotel.pdf",
            },
        ),
    )
    client = RealExtractionClient(base_url="https://extract.example.com")

    result = await client.extract(str(pdf))

    assert result.extracted == {"contract_number": "GH-1"}
    assert result.document_name == "hotel.pdf"
    assert str(requests[0].url) == "https://extract.example.com/contracts/extract"
    assert b"%PDF-1.4" in requests[0].content


@pytest.mark.asyncio
async def test_real_extraction_client_errors(monkeypatch):
    _patch_transport(monkeypatch, lambda request: httpx.Response(500, json={"details": "model timeout"}))
    client = RealExtractionClient(base_url="https://extract.example.com")
    with pytest.raises(ExtractionError, match="model timeout"):
        await client.extract(("a.pdf", b"x"))


@pytest.mark.asyncio
async def test_real_extraction_client_rejects_bad_shape(monkeypatch):
    _patch_transport(monkeypatch, lambda request: httpx.Response(200, json={"extracted": "text"}))
    client = RealExtractionClient(base_url="https://extract.example.com")
    with pytest.raises(ExtractionError):
        await client.extract(("a.pdf", b"x"))


@pytest.mark.asyncio
async def test_mock_contracts_client_checks_required_fields():
    client = MockContractsClient()
    with pytest.raises(ContractSubmissionError):
        await client.create_contract({"contract": {"supplier_id": "s"}})
    created = await client.create_contract(
        {"contract": {"supplier_id": "s", "contract_number": "n", "contract_name": "c"}}
    )
    assert client.contracts[0]["id"] == created.contract_id


def test_factory_selects_mocks_without_urls(monkeypatch):
    monkeypatch.delenv("CONTRACTS_API_URL", raising=False)
    monkeypatch.delenv("EXTRACTION_API_URL", raising=False)
    cfg = WizardConfig()
    assert isinstance(factory.build_contracts_client(cfg), MockContractsClient)
    assert isinstance(factory.build_extraction_client(cfg), MockExtractionClient)


def test_factory_selects_real_clients_from_env(monkeypatch):
    monkeypatch.setenv("CONTRACTS_API_URL", "https://api.example.com")
    monkeypatch.setenv("EXTRACTION_API_URL", "https://extract.example.com")
    cfg = WizardConfig()
    contracts = factory.build_contracts_client(cfg)
    extraction = factory.build_extraction_client(cfg)
    assert isinstance(contracts, RealContractsClient)
    assert contracts.base_url == "https://api.example.com"
    assert isinstance(extraction, RealExtractionClient)


def test_create_session_uses_config_file(monkeypatch):
    monkeypatch.delenv("CONTRACTS_API_URL", raising=False)
    monkeypatch.delenv("EXTRACTION_API_URL", raising=False)
    session = factory.create_session()
    assert session.autosave.delay_seconds == 30
    assert session.releases.cadence[0]["days_before"] == 90
    session.close()


def _refuse(request):
    raise httpx.ConnectError("connection refused", request=request)


@pytest.mark.asyncio
async def test_real_contracts_client_wraps_transport_errors(monkeypatch):
    _patch_transport(monkeypatch, _refuse)
    client = RealContractsClient(base_url="https://api.example.com")

    with pytest.raises(ContractSubmissionError) as exc:
        await client.create_contract({})
    assert exc.value.message == "Failed to create contract"
    assert isinstance(exc.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_submit_keeps_draft_when_contracts_api_unreachable(monkeypatch):
    _patch_transport(monkeypatch, _refuse)
    session = ContractWizardSession(
        extraction_client=MockExtractionClient(),
        contracts_client=RealContractsClient(base_url="https://api.example.com"),
    )
    session.store.update_section("contract", {"supplier_id": "s", "contract_number": "n", "contract_name": "c"})

    out = await session.submit()

    assert out["success"] is False
    assert out["message"] == "Failed to create contract"
    assert session.store.draft["contract"]["contract_number"] == "n"
    assert session.has_unsaved_changes is True
    session.close()
