#!/usr/bin/env python3
"""Demonstration of sending GraphQL requests with gql-wire.

This script shows how to:
1. Build a request with a typed decoder
2. Run it as a deferred task
3. Dispatch it as a command through a runtime

It talks to the public Countries API, so it needs network access.
"""

import asyncio

from pydantic import BaseModel

from gql_wire.core import (
    EndpointConfig,
    GraphQLRequest,
    HttpxEngine,
    PartialSuccess,
    Runtime,
    Success,
    custom_send_query,
    field_decoder,
    pydantic_decoder,
    query_task,
)

URL = "https://countries.trevorblades.com/graphql"


class Country(BaseModel):
    code: str
    name: str
    capital: str | None = None


COUNTRY = GraphQLRequest.query(
    "query Country($code: ID!) { country(code: $code) { code name capital } }",
    variables={"code": "NZ"},
    decoder=field_decoder("country", pydantic_decoder(Country)),
)


def describe(outcome) -> str:
    if isinstance(outcome, Success):
        return f"{outcome.data.name} (capital: {outcome.data.capital})"
    if isinstance(outcome, PartialSuccess):
        return f"{outcome.data.name}, with warnings: {[e.message for e in outcome.errors]}"
    return outcome.describe()


async def main():
    async with HttpxEngine() as engine:
        print("1. Deferred task")
        outcome = await query_task(URL, COUNTRY).run(engine)
        print(f"   {describe(outcome)}")

        print("\n2. Command through a runtime, sent with GET")
        runtime = Runtime(engine, dispatch=lambda msg: print(f"   message: {msg}"))
        config = EndpointConfig(URL, method="GET").with_timeout(5000)
        runtime.perform(custom_send_query(config, lambda o: ("GotCountry", describe(o)), COUNTRY))
        await runtime.drain()


if __name__ == "__main__":
    asyncio.run(main())
