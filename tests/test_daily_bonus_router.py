class TestDailyBonusRoutes:
    """일일 보너스 라우터 테스트"""

    def test_claim_then_already_claimed(self, client, make_account, auth_headers):
        # Given
        make_account(1)

        # When
        first = client.post("/api/v1/daily-bonus/claim", headers=auth_headers(1))
        second = client.post("/api/v1/daily-bonus/claim", headers=auth_headers(1))

        # Then
        assert first.status_code == 200
        assert first.json()["success"] is True
        assert first.json()["coins"] == 5
        assert second.status_code == 200
        assert second.json()["success"] is False
        assert second.json()["status"] == "ALREADY_CLAIMED"

        balance = client.get("/api/v1/coins/balance", headers=auth_headers(1))
        assert balance.json()["coin_balance"] == 5

    def test_status(self, client, make_account, auth_headers):
        make_account(1)

        response = client.get("/api/v1/daily-bonus/status", headers=auth_headers(1))

        assert response.status_code == 200
        data = response.json()
        assert data["claimed_today"] is False
        assert data["reward"] == 5

    def test_streak_milestone_not_reached(self, client, make_account, auth_headers):
        make_account(1)

        response = client.post("/api/v1/daily-bonus/streak/7/claim", headers=auth_headers(1))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "STREAK_001"

    def test_streak_status(self, client, make_account, auth_headers):
        make_account(1)
        client.post("/api/v1/daily-bonus/claim", headers=auth_headers(1))

        response = client.get("/api/v1/daily-bonus/streak", headers=auth_headers(1))

        assert response.status_code == 200
        assert response.json()["current_streak"] == 1
