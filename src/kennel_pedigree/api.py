"""GraphQL client for the kennel application and a dog repository on top of it."""

import json
from typing import Any

import requests
from loguru import logger

from kennel_pedigree.config import API_TOKEN_FILES, GRAPHQL_TIMEOUT, GRAPHQL_URL
from kennel_pedigree.core.importer.json_reader import parse_dog
from kennel_pedigree.errors import DogNotFoundError, RepositoryError
from kennel_pedigree.models.dog import DogRecord, ParentLinks

DOG_QUERY = """\
query GetDog($id: ID!) {
  dog(id: $id) {
    id name gender registrationNumber dateOfBirth breed color
    currentOwner { id }
    sire { id }
    dam { id }
  }
}
"""

LINK_DOG_TO_PARENTS = """\
mutation linkDogToParents($dogId: ID!, $sireId: ID, $damId: ID) {
  linkDogToParents(dogId: $dogId, sireId: $sireId, damId: $damId) {
    id
    sire { id }
    dam { id }
  }
}
"""


class KennelApi:
    """Encapsulated kennel GraphQL API."""

    def __init__(self, *, url: str = GRAPHQL_URL) -> None:
        self.url = url
        self.sess = requests.Session()

        api_token_name: str | None = None
        for token_path in API_TOKEN_FILES:
            try:
                self.api_token = token_path.read_text(encoding="utf-8").strip()
                api_token_name = str(token_path)
                break
            except FileNotFoundError:
                pass
        else:
            msg = f"Cannot find kennel API token file, was looking at {API_TOKEN_FILES!r}"
            raise RuntimeError(msg)

        self.sess.headers["Authorization"] = f"Bearer {self.api_token}"
        logger.debug("API ready: token from {!r}, url {!r}", api_token_name, self.url)

    def call(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """Run a GraphQL operation, return its data."""
        logger.debug("Making request: {!r}", repr(variables)[:64])
        try:
            r = self.sess.post(
                self.url,
                data=json.dumps({"query": query, "variables": variables}),
                headers={"Content-Type": "application/json"},
                timeout=GRAPHQL_TIMEOUT,
            )
            r.raise_for_status()
            rv: dict[str, Any] = r.json()
        except requests.RequestException as e:
            msg = f"API request failed: {e}"
            raise RepositoryError(msg) from e

        if rv.get("errors"):
            messages = "; ".join(err.get("message", "?") for err in rv["errors"])
            msg = f"API call failed: ({variables!r}) -> {messages}"
            raise RepositoryError(msg)
        return rv.get("data") or {}


class GraphQLDogRepository:
    """Dog repository backed by the kennel application's GraphQL API."""

    def __init__(self, api: KennelApi) -> None:
        self._api = api

    def resolve_dog(self, dog_id: str) -> DogRecord:
        data = self._api.call(DOG_QUERY, {"id": dog_id})
        raw = data.get("dog")
        if not raw:
            raise DogNotFoundError(dog_id)
        try:
            return parse_dog(raw)
        except ValueError as e:
            msg = f"Malformed dog {dog_id!r} from API: {e}"
            raise RepositoryError(msg) from e

    def write_parent_links(self, dog_id: str, links: ParentLinks) -> None:
        variables: dict[str, Any] = {"dogId": dog_id}
        if links.sire_id is not None:
            variables["sireId"] = links.sire_id
        if links.dam_id is not None:
            variables["damId"] = links.dam_id

        data = self._api.call(LINK_DOG_TO_PARENTS, variables)
        if not data.get("linkDogToParents"):
            msg = f"API reported link failed for {dog_id!r}: {data}"
            raise RepositoryError(msg)
