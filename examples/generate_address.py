"""
Structured Outputs Example
==========================

Generates a JSON schema from a dataclass, sends it as the response format
of a chat completion and prints the fields of the JSON reply.

To run this example:
    uv run --extra examples python examples/generate_address.py

Note: Requires OPENAI_API_KEY environment variable or .env file.
"""

import json
from dataclasses import dataclass
from typing import Annotated

import litellm
from dotenv import load_dotenv

from gptschema import JsonTag, format_schema_for_openai


@dataclass
class Address:
    city: Annotated[str, JsonTag("city")]
    country: Annotated[str, JsonTag("country")]
    line1: Annotated[str, JsonTag("line1")]
    line2: Annotated[str | None, JsonTag("line2,omitempty")]
    building_name: Annotated[str | None, JsonTag("buildingName,omitempty")]
    postal_code: Annotated[str | None, JsonTag("postalCode,omitempty")]
    region: Annotated[str, JsonTag("region")]


@dataclass
class AddressItem:
    id: Annotated[str, JsonTag("id")]
    name: Annotated[str, JsonTag("name")]
    brief_intro: Annotated[str, JsonTag("briefIntro")]
    created_at: Annotated[int, JsonTag("createdAt")]
    updated_at: Annotated[int, JsonTag("updatedAt")]
    tags: Annotated[list[str], JsonTag("tags")]
    address: Annotated[Address, JsonTag("address")]


def main() -> None:
    load_dotenv()

    question = "Generate a mock address for a historical russian writer"
    response_format = format_schema_for_openai(
        AddressItem,
        name="address_item",
        description="mock address for a historical russian writer",
    )

    print(f"> {question}")
    response = litellm.completion(
        model="gpt-4.1-mini",
        messages=[{"role": "user", "content": question}],
        response_format=response_format,
    )

    # Keys follow the tag names, not the dataclass field names
    item = json.loads(response.choices[0].message.content)

    print("ID:", item["id"])
    print("Name:", item["name"])
    print("Brief Intro:", item["briefIntro"])
    for tag in item["tags"]:
        print("  Tag:", tag)
    print("City:", item["address"]["city"])
    print("Country:", item["address"]["country"])
    print("Postal Code:", item["address"]["postalCode"])


if __name__ == "__main__":
    main()
