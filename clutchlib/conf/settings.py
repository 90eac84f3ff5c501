#  Copyright 2025 Hathor Labs
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#  http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.

from pydantic import Field, field_validator

from clutchlib.utils.pydantic import BaseModel


class ClutchSettings(BaseModel):
    # Name of the environment: "production", "localnet", "unittests", ...
    NETWORK_NAME: str

    # Base url of the ClutchHub API, without trailing slash
    API_URL: str

    # Path of the GraphQL endpoint, relative to API_URL
    GRAPHQL_PATH: str = '/graphql'

    # Path where signed transactions are posted, relative to API_URL
    SEND_TRANSACTION_PATH: str = '/send-transaction'

    # Sent on every request
    USER_AGENT: str = 'clutchlib'

    # Total timeout of a single HTTP request, in seconds
    REQUEST_TIMEOUT: float = Field(default=30.0, gt=0)

    # A cached auth token is renewed when it expires in less than this many seconds
    TOKEN_REFRESH_MARGIN: int = Field(default=60, ge=0)

    @field_validator('API_URL')
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip('/')

    @field_validator('GRAPHQL_PATH', 'SEND_TRANSACTION_PATH')
    @classmethod
    def _leading_slash(cls, value: str) -> str:
        return value if value.startswith('/') else '/' + value

    @property
    def graphql_url(self) -> str:
        return self.API_URL + self.GRAPHQL_PATH

    @property
    def send_transaction_url(self) -> str:
        return self.API_URL + self.SEND_TRANSACTION_PATH
