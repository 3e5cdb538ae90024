from labtrack.models.reference_standard import ReferenceStandard, ReferenceStandardRule


def _standard(db_session) -> ReferenceStandard:
    standard = ReferenceStandard(name="Rede de Distribuição")
    standard.rules = [
        ReferenceStandardRule(parameter_key="ph", condition_type="RANGE", min_value=6.0, max_value=9.5),
        ReferenceStandardRule(parameter_key="turbidez", condition_type="MAX", max_value=5.0),
        ReferenceStandardRule(parameter_key="coliformes_totais", condition_type="ABSENCE"),
    ]
    db_session.add(standard)
    db_session.commit()
    db_session.refresh(standard)
    return standard


def _create_sample(client, **payload) -> dict:
    response = client.post("/api/samples", json=payload)
    assert response.status_code == 201, response.json()
    return response.json()["data"]


def test_create_sample_stores_entries_as_text(client, db_session):
    standard = _standard(db_session)
    sample = _create_sample(
        client,
        code="RD-001",
        reference_standard_id=standard.id,
        ph=7,
        turbidez="< 1,0",
        params={"coliformes_totais": "Ausente"},
    )

    assert sample["ph"] == "7"
    assert sample["turbidez"] == "< 1,0"
    assert sample["params"] == '{"coliformes_totais": "Ausente"}'


def test_create_sample_rejects_duplicate_code(client):
    _create_sample(client, code="RD-002")
    response = client.post("/api/samples", json={"code": "RD-002"})
    assert response.status_code == 400


def test_sample_conformity_non_compliant(client, db_session):
    standard = _standard(db_session)
    sample = _create_sample(
        client,
        code="RD-003",
        reference_standard_id=standard.id,
        ph="7",
        turbidez="6",
        params={"coliformes_totais": "Presença"},
    )

    response = client.get(f"/api/samples/{sample['id']}/conformity")
    assert response.status_code == 200
    report = response.json()["data"]
    assert report["declaration"] == "NON_COMPLIANT"
    assert report["evaluated_count"] == 3
    assert sorted(failure["parameter_key"] for failure in report["failures"]) == ["coliformes_totais", "turbidez"]
    categories = [group["category"] for group in report["categories"]]
    assert categories == ["Físico-Químicos", "Microbiológicos"]


def test_results_bag_overrides_other_sources(client, db_session):
    standard = _standard(db_session)
    sample = _create_sample(
        client,
        code="RD-004",
        reference_standard_id=standard.id,
        turbidez="8",
        params={"turbidez": "7"},
    )

    client.patch(f"/api/samples/{sample['id']}", json={"results": {"turbidez": "2"}})
    report = client.get(f"/api/samples/{sample['id']}/conformity").json()["data"]
    assert report["declaration"] == "COMPLIANT"
    assert report["failures"] == []


def test_malformed_params_bag_degrades_to_empty(client, db_session):
    standard = _standard(db_session)
    sample = _create_sample(client, code="RD-005", reference_standard_id=standard.id, params="{oops")

    response = client.get(f"/api/samples/{sample['id']}/conformity")
    assert response.status_code == 200
    assert response.json()["data"]["declaration"] == "NOT_EVALUATED"


def test_sample_without_standard_needs_one(client):
    sample = _create_sample(client, code="RD-006", ph="7")
    response = client.get(f"/api/samples/{sample['id']}/conformity")
    assert response.status_code == 400


def test_batch_conformity_rollup(client, db_session):
    standard = _standard(db_session)
    _create_sample(client, code="L7-01", batch_code="L7", reference_standard_id=standard.id, ph="7", turbidez="1")
    _create_sample(client, code="L7-02", batch_code="L7", reference_standard_id=standard.id, ph="< 5,0")
    _create_sample(client, code="L7-03", batch_code="L7", reference_standard_id=standard.id)

    response = client.get("/api/samples/batches/L7/conformity")
    assert response.status_code == 200
    batch = response.json()["data"]
    assert batch["batch_code"] == "L7"
    assert len(batch["samples"]) == 3
    assert batch["evaluated_count"] == 3
    assert batch["fail_count"] == 1
    assert batch["declaration"] == "NON_COMPLIANT"
    assert batch["failures"][0]["sample_code"] == "L7-02"


def test_batch_conformity_unknown_batch(client):
    response = client.get("/api/samples/batches/NOPE/conformity")
    assert response.status_code == 404
