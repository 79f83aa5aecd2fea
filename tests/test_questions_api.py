"""Tests for question and answer choice endpoints."""

import pytest
from httpx import AsyncClient


@pytest.fixture
async def category_id(client: AsyncClient, admin_headers: dict[str, str]) -> int:
    response = await client.post(
        "/api/categories/",
        json={"name": "Cardiology", "slug": "cardiology"},
        headers=admin_headers,
    )
    return response.json()["id"]


def question_payload(category_id: int, **overrides) -> dict:
    payload = {
        "question_text": "Which rhythm is irregularly irregular?",
        "difficulty": "medium",
        "explanation": "Atrial fibrillation has no organised atrial activity.",
        "category_ids": [category_id],
        "answers": [
            {"choice_text": "Sinus rhythm", "choice_letter": "A", "is_correct": False, "order": 0},
            {"choice_text": "Atrial fibrillation", "choice_letter": "B", "is_correct": True, "order": 1},
            {"choice_text": "Atrial flutter", "choice_letter": "C", "is_correct": False, "order": 2},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
async def question(
    client: AsyncClient,
    admin_headers: dict[str, str],
    category_id: int,
) -> dict:
    response = await client.post(
        "/api/questions/", json=question_payload(category_id), headers=admin_headers
    )
    assert response.status_code == 201
    return response.json()


class TestCreateQuestion:
    """Tests for POST /api/questions/."""

    async def test_create_returns_question_with_answers(
        self,
        question: dict,
        category_id: int,
    ) -> None:
        assert question["category_ids"] == [category_id]
        assert question["is_active"] is True
        assert [a["choice_letter"] for a in question["answers"]] == ["A", "B", "C"]
        assert all(a["question_id"] == question["id"] for a in question["answers"])

    async def test_two_correct_answers_rejected(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        category_id: int,
    ) -> None:
        payload = question_payload(category_id)
        payload["answers"][0]["is_correct"] = True

        response = await client.post(
            "/api/questions/", json=payload, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"
        assert (await client.get("/api/questions/")).json() == []

    async def test_unknown_category_is_404(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        category_id: int,
    ) -> None:
        response = await client.post(
            "/api/questions/",
            json=question_payload(category_id, category_ids=[category_id, 999]),
            headers=admin_headers,
        )

        assert response.status_code == 404
        assert (await client.get("/api/questions/")).json() == []

    async def test_empty_category_list_rejected(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        category_id: int,
    ) -> None:
        response = await client.post(
            "/api/questions/",
            json=question_payload(category_id, category_ids=[]),
            headers=admin_headers,
        )

        assert response.status_code == 422

    async def test_student_cannot_create(
        self,
        client: AsyncClient,
        student_headers: dict[str, str],
        category_id: int,
    ) -> None:
        response = await client.post(
            "/api/questions/", json=question_payload(category_id), headers=student_headers
        )

        assert response.status_code == 403


class TestReadQuestions:
    """Tests for question listing and lookup."""

    async def test_get_question_with_answers(
        self,
        client: AsyncClient,
        question: dict,
    ) -> None:
        response = await client.get(f"/api/questions/{question['id']}")

        assert response.status_code == 200
        data = response.json()
        assert data["question_text"] == question["question_text"]
        assert len(data["answers"]) == 3

    async def test_missing_question_is_null(self, client: AsyncClient) -> None:
        response = await client.get("/api/questions/999")

        assert response.status_code == 200
        assert response.json() is None

    async def test_inactive_hidden_from_public_lists(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        category_id: int,
        question: dict,
    ) -> None:
        """Drafts appear only in the admin listing."""
        await client.post(
            "/api/questions/",
            json=question_payload(category_id, is_active=False, question_text="Draft"),
            headers=admin_headers,
        )

        active = await client.get("/api/questions/")
        by_category = await client.get(f"/api/questions/by-category/{category_id}")
        everything = await client.get("/api/questions/all", headers=admin_headers)

        assert [q["id"] for q in active.json()] == [question["id"]]
        assert [q["id"] for q in by_category.json()] == [question["id"]]
        assert len(everything.json()) == 2

    async def test_all_requires_admin(
        self,
        client: AsyncClient,
        student_headers: dict[str, str],
    ) -> None:
        response = await client.get("/api/questions/all", headers=student_headers)

        assert response.status_code == 403


class TestUpdateQuestion:
    """Tests for PATCH and PUT /answers."""

    async def test_patch_leaves_answers(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        question: dict,
    ) -> None:
        response = await client.patch(
            f"/api/questions/{question['id']}",
            json={"difficulty": "hard", "is_active": False},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["difficulty"] == "hard"
        assert data["is_active"] is False
        assert data["answers"] == question["answers"]

    async def test_patch_cannot_null_required_field(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        question: dict,
    ) -> None:
        response = await client.patch(
            f"/api/questions/{question['id']}",
            json={"explanation": None},
            headers=admin_headers,
        )

        assert response.status_code == 422

    async def test_replace_answers(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        question: dict,
    ) -> None:
        """Listed ids are patched, unlisted ones deleted, new ones inserted."""
        a, b, _ = question["answers"]

        response = await client.put(
            f"/api/questions/{question['id']}/answers",
            json={
                "answers": [
                    {**a, "choice_text": "Normal sinus rhythm"},
                    b,
                    {
                        "choice_text": "Multifocal atrial tachycardia",
                        "choice_letter": "D",
                        "is_correct": False,
                        "order": 2,
                    },
                ]
            },
            headers=admin_headers,
        )

        assert response.status_code == 200
        answers = response.json()["answers"]
        assert [x["choice_letter"] for x in answers] == ["A", "B", "D"]
        assert answers[0]["id"] == a["id"]
        assert answers[0]["choice_text"] == "Normal sinus rhythm"
        assert answers[1]["id"] == b["id"]

    async def test_replace_answers_without_correct_choice(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        question: dict,
    ) -> None:
        answers = [{**x, "is_correct": False} for x in question["answers"]]

        response = await client.put(
            f"/api/questions/{question['id']}/answers",
            json={"answers": answers},
            headers=admin_headers,
        )

        assert response.status_code == 400
        stored = (await client.get(f"/api/questions/{question['id']}")).json()
        assert stored["answers"] == question["answers"]


class TestDeleteQuestion:
    """Tests for DELETE /api/questions/{id}."""

    async def test_delete_frees_category(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
        category_id: int,
        question: dict,
    ) -> None:
        """A category in use cannot be deleted until its questions are gone."""
        blocked = await client.delete(
            f"/api/categories/{category_id}", headers=admin_headers
        )
        assert blocked.status_code == 409

        deleted = await client.delete(
            f"/api/questions/{question['id']}", headers=admin_headers
        )
        assert deleted.status_code == 204
        assert (await client.get(f"/api/questions/{question['id']}")).json() is None

        freed = await client.delete(
            f"/api/categories/{category_id}", headers=admin_headers
        )
        assert freed.status_code == 204

    async def test_delete_missing_question(
        self,
        client: AsyncClient,
        admin_headers: dict[str, str],
    ) -> None:
        response = await client.delete("/api/questions/999", headers=admin_headers)

        assert response.status_code == 404
