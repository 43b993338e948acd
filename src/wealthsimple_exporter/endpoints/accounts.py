"""
Accounts endpoint (Wealthsimple v1).

Included routes:
- GET /accounts

Logic flow:
1) Attach the bearer credential handed in by the caller.
2) Pass path + headers to WealthsimpleHttpClient.
3) Return the raw response; poller.poll_once() classifies the status.

Tracing notes:
- A 401 here means the bearer expired, not that the credentials are wrong.
"""

from __future__ import annotations

import requests

from ..http import WealthsimpleHttpClient

ACCOUNTS_PATH = "/accounts"


class AccountsAPI:
    """
    Endpoint grouping for account-related routes.
    """

    def __init__(self, client: WealthsimpleHttpClient) -> None:
        self._client = client

    def list_accounts(self, bearer: str) -> requests.Response:
        """
        GET /accounts

        Inputs:
        - bearer: full Authorization value ("Bearer <token>").

        Outputs:
        - Response whose JSON body holds a `results` list of accounts.
        """

        headers = {"Authorization": bearer, "Accept": "*/*"}
        return self._client.request("GET", ACCOUNTS_PATH, headers=headers)
