"""Controlled generation with typed response schemas.

This example shows:
- Several candidates returned as raw JSON text
- Decoding a list of dataclasses from the first candidate
- Field constraints (enum values) carried into the schema
- Multimodal prompts built from image URIs and text
- Enum classification with a str subclass listing its values

Requires GOOGLE_API_KEY (or Vertex AI settings) in the environment.
"""

import os
import sys
from dataclasses import dataclass, field
from pprint import pprint

from google import genai

import genaischema
from genaischema.client import Content, GenaiClient, part_from_text, part_from_uri

if not (os.environ.get("GOOGLE_API_KEY") or os.environ.get("GOOGLE_CLOUD_PROJECT")):
    sys.exit("Set GOOGLE_API_KEY (or GOOGLE_CLOUD_PROJECT for Vertex AI) to run this example.")

MODEL = os.environ.get("GENAISCHEMA_MODEL", genaischema.DEFAULT_MODEL)

client = GenaiClient(genai.Client(http_options={"api_version": "v1"}))


@dataclass
class Recipe:
    recipe_name: str


@dataclass
class Review:
    rating: int = 0
    flavor: str = ""


@dataclass
class DailyForecast:
    Day: str
    Forecast: str
    Temperature: str
    Humidity: str = ""
    WindSpeed: str = field(default="", metadata={"description": "Wind speed in km/h"})


@dataclass
class WeeklyForecast:
    forecast: list[DailyForecast] = field(default_factory=list)


ITEM_CATEGORIES = [
    "clothing",
    "winter apparel",
    "specialized apparel",
    "furniture",
    "decor",
    "tableware",
    "cookware",
    "toys",
]
CONDITIONS = ["new in package", "like new", "gently used", "used", "damaged", "soiled"]


@dataclass
class ProductAssessment:
    to_discard: int = 0
    subcategory: str = ""
    safe_handling: str = ""
    item_category: str = field(default="", metadata={"enum": ITEM_CATEGORIES})
    for_resale: int = 0
    condition: str = field(default="", metadata={"enum": CONDITIONS})


@dataclass
class DetectedObject:
    object: str = ""


class FilmGenre(str):
    @classmethod
    def enum(cls):
        return ["drama", "comedy", "documentary"]


print("Example: Send a prompt with a response schema (three raw candidates)")
config = genaischema.GenerationConfig(
    response_mime_type=genaischema.JSON_MIME_TYPE, candidate_count=3, temperature=0.6
)
pprint(
    genaischema.text_candidates(
        list[Recipe], "List a few popular cookie recipes", config, client=client, model=MODEL
    )
)

print("\nExample: Send a prompt with a response schema")
pprint(
    genaischema.first_object(
        list[Recipe], "List a few popular cookie recipes", client=client, model=MODEL
    )
)

print("\nExample: Summarize review ratings")
reviews_prompt = """
Reviews from our social media:

- "Absolutely loved it! Best ice cream I've ever had." Rating: 4, Flavor: Strawberry Cheesecake
- "Quite good, but a bit too sweet for my taste." Rating: 1, Flavor: Mango Tango
"""
pprint(genaischema.first_object(list[Review], reviews_prompt, client=client, model=MODEL))

print("\nExample: Forecast the weather for each day of the week")
weather_prompt = """
The week ahead brings a mix of weather conditions.
Sunday is expected to be sunny with a temperature of 77°F and a humidity level of 50%. Winds will be light at around 10 km/h.
Monday will see partly cloudy skies with a slightly cooler temperature of 72°F and humidity increasing to 55%. Winds will pick up slightly to around 15 km/h.
Tuesday brings rain showers, with temperatures dropping to 64°F and humidity rising to 70%. Expect stronger winds at 20 km/h.
Wednesday may see thunderstorms, with a temperature of 68°F and high humidity of 75%. Winds will be gusty at 25 km/h.
Thursday will be cloudy with a temperature of 66°F and moderate humidity at 60%. Winds will ease slightly to 18 km/h.
Friday returns to partly cloudy conditions, with a temperature of 73°F and lower humidity at 45%. Winds will be light at 12 km/h.
Finally, Saturday rounds off the week with sunny skies, a temperature of 80°F, and a humidity level of 40%. Winds will be gentle at 8 km/h.
"""
pprint(genaischema.first_object(WeeklyForecast, weather_prompt, client=client, model=MODEL))

print("\nExample: Classify a product")
product_prompt = """
Item description:
The item is a long winter coat that has many tears all around the seams and is falling apart.
It has large questionable stains on it.
"""
pprint(
    genaischema.first_object(list[ProductAssessment], product_prompt, client=client, model=MODEL)
)

print("\nExample: Detect objects in images")
contents = [
    Content(
        parts=[
            part_from_uri(
                "gs://cloud-samples-data/generative-ai/image/office-desk.jpeg", "image/jpeg"
            ),
            part_from_uri(
                "gs://cloud-samples-data/generative-ai/image/gardening-tools.jpeg", "image/jpeg"
            ),
            part_from_text("Generate a list of objects in the images."),
        ]
    )
]
pprint(genaischema.first_object(list[DetectedObject], contents, client=client, model=MODEL))

print("\nExample: Enum output")
film_prompt = """
The film aims to educate and inform viewers about real-life subjects, events, or people.
It offers a factual record of a particular topic by combining interviews, historical footage,
and narration. The primary purpose of a film is to present information and provide insights
into various aspects of reality.
"""
print(genaischema.first_enum(FilmGenre, film_prompt, client=client, model=MODEL))
