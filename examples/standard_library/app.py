"""Standard library -- each, zip, escapers and the rendering Logger.

Registers StandardLibrary in the base context of every template, then
renders a numbered list, parallel columns and a query string.

Run:
    python app.py
"""

import logging

from mustachio import Configuration, Environment, StandardLibrary
from mustachio.library import Logger

configuration = Configuration()
for key, value in StandardLibrary.items():
    configuration = configuration.register_in_base_context(key, value)

env = Environment(configuration=configuration)

numbered = env.from_string("{{# each(items) }}{{ @indexPlusOne }}. {{ . }}{{^ @last }}, {{/}}{{/}}")
numbered_output = numbered.render(items=["apples", "pears", "plums"])

columns = env.from_string("{{# zip(names, scores) }}{{ name }}={{ score }};{{/}}")
columns_output = columns.render(
    names=[{"name": "ann"}, {"name": "bob"}],
    scores=[{"score": 3}, {"score": 5}],
)

link = env.from_string('<a href="/search?q={{ URLEscape(query) }}">{{ query }}</a>')
link_output = link.render(query="cats & dogs")


def main() -> None:
    print(numbered_output)
    print(columns_output)
    print(link_output)

    # Trace sections as they render
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    traced = env.from_string("{{# items }}{{ . }}{{/ items }}")
    traced.extend_base_context(Logger())
    traced.render(items=[1, 2])


if __name__ == "__main__":
    main()
