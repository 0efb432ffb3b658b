from datetime import datetime
from decimal import Decimal

from app import models


def add_entries(db_session):
    for day, agenda_id in ((18, 10), (19, 10), (20, 11)):
        db_session.add(
            models.Lancamento(
                valor=Decimal("80.00"),
                descricao=f"Agendamento {day}",
                data_lancamento=datetime(2026, 10, day),
                tipo="ENTRADA",
                status_pagamento="PENDENTE",
                agenda_id=agenda_id,
                usuario_id="recepcao",
                status=models.STATUS_ACTIVE,
            )
        )
    db_session.commit()


class TestValorProcedimento:
    def test_prices_for_plan_and_client_type(self, client, clinic, auth_headers):
        response = client.get("/valor-procedimento?convenio_id=1&tipoCliente=NSOCIO", headers=auth_headers)

        assert response.status_code == 200
        [row] = response.json()
        assert row["procedimento"] == {"id": 1, "nome": "Consulta Cardiológica", "codigo": "10101012"}
        assert row["valor"] == 100.0
        assert row["desconto"] == 20.0
        assert row["valorFinal"] == 80.0
        assert row["convenio_id"] == 1
        assert row["tipo_cliente"] == "NSOCIO"

    def test_unpriced_client_type(self, client, clinic, auth_headers):
        response = client.get("/valor-procedimento?convenio_id=1&tipoCliente=OUTRO", headers=auth_headers)
        assert response.json() == []

    def test_unknown_plan(self, client, clinic, auth_headers):
        response = client.get("/valor-procedimento?convenio_id=99&tipoCliente=NSOCIO", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "Convênio não encontrado"

    def test_required_params(self, client, clinic, auth_headers):
        assert client.get("/valor-procedimento?convenio_id=1", headers=auth_headers).status_code == 422


class TestLancamentos:
    def test_newest_first(self, client, db_session, auth_headers):
        add_entries(db_session)

        body = client.get("/lancamentos", headers=auth_headers).json()

        assert [e["descricao"] for e in body["data"]] == ["Agendamento 20", "Agendamento 19", "Agendamento 18"]
        assert body["data"][0]["valor"] == 80.0
        assert body["pagination"]["total"] == 3

    def test_filter_by_agenda_and_dates(self, client, db_session, auth_headers):
        add_entries(db_session)

        by_agenda = client.get("/lancamentos?agenda_id=10", headers=auth_headers).json()
        assert by_agenda["pagination"]["total"] == 2

        by_date = client.get(
            "/lancamentos?start_date=2026-10-19T00:00:00&end_date=2026-10-19T23:59:59", headers=auth_headers
        ).json()
        assert [e["descricao"] for e in by_date["data"]] == ["Agendamento 19"]


class TestDebugProcedimentos:
    def test_without_selection(self, client, clinic, auth_headers):
        body = client.get("/debug/procedimentos", headers=auth_headers).json()

        assert [c["nome"] for c in body["clientes"]] == ["Ana Paciente"]
        assert body["clienteSelecionado"] is None
        assert body["tipoClienteSelecionado"] == "NSOCIO"
        assert body["procedimentos"] == []

    def test_client_and_plan_selected(self, client, clinic, auth_headers):
        body = client.get("/debug/procedimentos?cliente_id=1&convenio_id=1", headers=auth_headers).json()

        assert body["clienteSelecionado"]["id"] == 1
        assert body["convenioSelecionado"] == {"convenioId": 1, "nome": "Plano Ouro", "desconto": 5.0}
        assert [p["valorFinal"] for p in body["procedimentos"]] == [80.0]

    def test_client_type_override(self, client, clinic, auth_headers):
        body = client.get(
            "/debug/procedimentos?cliente_id=1&convenio_id=1&tipoCliente=SOCIO", headers=auth_headers
        ).json()

        assert body["tipoClienteSelecionado"] == "SOCIO"
        assert [p["valorFinal"] for p in body["procedimentos"]] == [48.0]

    def test_price_matrix(self, client, db_session, clinic, auth_headers):
        db_session.add(models.Convenio(id=2, nome="Plano Bronze"))
        db_session.commit()

        response = client.get("/debug/procedimentos/matrix", headers=auth_headers)

        assert response.status_code == 200
        rows = response.json()
        assert len(rows) == 8
        assert rows[0] == {"tipoCliente": "SOCIO", "convenioId": 2, "nome": "Plano Bronze", "count": 0}
        counts = {(r["tipoCliente"], r["convenioId"]): r["count"] for r in rows}
        assert counts[("SOCIO", 1)] == 1
        assert counts[("NSOCIO", 1)] == 1
        assert counts[("PARCEIRO", 1)] == 0
        assert counts[("FUNCIONARIO", 1)] == 0
        assert [r["tipoCliente"] for r in rows[::2]] == ["SOCIO", "NSOCIO", "PARCEIRO", "FUNCIONARIO"]


class TestConvenios:
    def add_plans(self, db_session):
        db_session.add(models.Convenio(id=2, nome="Plano Prata", desconto=Decimal("10.00"), tabela_faturamento_id=1))
        db_session.add(models.Convenio(id=3, nome="Amil Empresarial"))
        db_session.commit()

    def test_ordered_by_name(self, client, db_session, clinic, auth_headers):
        self.add_plans(db_session)

        body = client.get("/convenios", headers=auth_headers).json()

        assert [c["nome"] for c in body["data"]] == ["Amil Empresarial", "Plano Ouro", "Plano Prata"]
        assert body["data"][1] == {"id": 1, "nome": "Plano Ouro", "desconto": 20.0, "tabela_faturamento_id": 1}
        assert body["data"][0]["desconto"] is None
        assert body["pagination"] == {"page": 1, "limit": 10, "total": 3, "totalPages": 1}

    def test_pagination_and_search(self, client, db_session, clinic, auth_headers):
        self.add_plans(db_session)

        paged = client.get("/convenios?page=2&limit=2", headers=auth_headers).json()
        assert [c["id"] for c in paged["data"]] == [2]
        assert paged["pagination"]["totalPages"] == 2

        found = client.get("/convenios?search=Plano", headers=auth_headers).json()
        assert [c["id"] for c in found["data"]] == [1, 2]
        assert found["pagination"]["total"] == 2

    def test_limit_1000_returns_every_plan(self, client, db_session, clinic, auth_headers):
        self.add_plans(db_session)

        for url in ("/convenios?limit=1000", "/convenios?all=true&page=3"):
            body = client.get(url, headers=auth_headers).json()
            assert len(body["data"]) == 3
            assert body["pagination"] == {"page": 1, "limit": 3, "total": 3, "totalPages": 1}

    def test_requires_authentication(self, client, clinic):
        assert client.get("/convenios").status_code == 401
