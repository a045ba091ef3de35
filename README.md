# goodwave

A small HTTP back end that serves a catalogue of surf spots kept in the
`surfSpots` collection of a MongoDB database. It lists spots (with pagination
and a short-lived response cache), adds new spots and lets a client mark a spot
as saved. Two further commands prepare and load exported spot data.

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Configuration

All three commands read a `.env` file (by default `.env` in the current
directory, or the path given with `--env-file`). The file must exist; if it
does not, the command prints an error and exits with status 1. Its values are
loaded into the environment, without overriding variables that are already
set.

The server and `goodwave-import-data` then require two variables:

| Variable          | Meaning                                  |
|-------------------|------------------------------------------|
| `MONGODB_URI`     | Connection string, e.g. `mongodb://localhost:27017` |
| `MONGODB_DB_NAME` | Must be set and non-empty                |

A minimal `.env`:

```
MONGODB_URI=mongodb://localhost:27017
MONGODB_DB_NAME=goodWave
```

`MONGODB_DB_NAME` is checked for presence, but the database that is opened is
always the one named `goodWave`.

## Running the server

```
goodwave-server [--env-file PATH] [--host HOST] [--port PORT]
```

The defaults are `--env-file .env`, `--host 0.0.0.0` and `--port 8080`. The
command pings MongoDB first (server API version 1, 20 second timeout) and exits
with status 1 if the settings are missing or the server cannot be reached.
It then runs the API on Flask's built-in server.

Cross-origin requests are answered for any origin: responses to a request whose
`Origin` header differs from the server's own host carry
`Access-Control-Allow-Origin: *`, and `OPTIONS` preflight requests are answered
with status 204 and the allowed methods and headers (cached for 12 hours).

## Endpoints

| Method | Path                    | Purpose |
|--------|-------------------------|---------|
| GET    | `/api/surf-spots`       | Paginated list of spots, sorted by id. Query parameters: `page` (default 1), `pageSize` (default 10), `forceRefresh` (`true` bypasses the cache). |
| GET    | `/surf-spots`           | Every spot, unpaginated. |
| POST   | `/api/surf-spots`       | Add a spot from a JSON body; any `_id` given is ignored, and the new id is returned as `{"message": ..., "id": "<hex>"}`. |
| PUT    | `/api/surf-spots/<id>`  | Set the saved flag: body `{"saved": true}` or `{"saved": false}` (a missing `saved` counts as `false`). |
| POST   | `/api/refresh-cache`    | Empty the response cache. |

`page` and `pageSize` take the leading integer of their value; a value without
one falls back to the default. A paginated answer looks like this:

```json
{
  "data": [ ... ],
  "page": 1,
  "pageSize": 10,
  "totalPages": 3,
  "totalItems": 27
}
```

Paginated answers are cached for five minutes per `page`/`pageSize` pair.

Errors are returned as `{"error": "<message>"}`: status 400 for a malformed
body or an id that is not a 24-character hex ObjectId, 404 when no spot has the
given id, and 500 when MongoDB fails or a stored document cannot be decoded.

A spot has these fields: `_id`, `destination`, `address`, `country`,
`difficulty` (an integer), `surf_break` (a list of strings), `season_start`,
`season_end`, `photo`, `link`, `geocode` and `saved` (a boolean).

## Loading data

Spot data exported as `{"records": [...], "offset": "..."}`, where each record
has `id`, `fields` and `createdTime`, is prepared and loaded in two steps.

Give every record a fresh MongoDB ObjectId:

```
goodwave-convert-ids [--env-file PATH] [--input PATH] [--output PATH]
```

It reads `data/surfSpots.json` and writes `data/surfSpots_converted.json` by
default, indented by two spaces, with the keys of each record's `fields`
sorted.

Replace the contents of the `surfSpots` collection with the converted records:

```
goodwave-import-data [--env-file PATH] [--input PATH]
```

It reads `data/surfSpots_converted.json` by default. The collection is dropped
first, then each record is inserted as a spot. The spot fields are taken from
the record's `Destination`, `Address`, `Destination State/Country`,
`Difficulty Level`, `Surf Break`, `Peak Surf Season Begins`,
`Peak Surf Season Ends`, `Photos` (the `url` of the first photo),
`Magic Seaweed Link` and `Geocode` fields. A record whose id is not a valid
ObjectId is reported and skipped; a record with a missing or wrongly typed
field stops the import with status 1. Because the collection is emptied before
inserting, imported spots start out unsaved.

## Using it from Python

The application can be built around any object that maps `"surfSpots"` to a
pymongo-style collection:

```python
from goodwave.api import create_app
from goodwave.cache import ResponseCache
from goodwave.database import connect_with_options

database = connect_with_options("mongodb://localhost:27017", "goodWave")
app = create_app(database, ResponseCache(ttl=60))
```

- `goodwave.database.connect` and `connect_with_options` ping the server and
  raise `DatabaseConnectionError` when it cannot be reached.
- `goodwave.cache.ResponseCache(ttl, clock)` is a thread-safe cache whose
  entries expire `ttl` seconds (default 300) after they are set, with `get`,
  `set` and `clear`.
- `goodwave.models.SurfSpot` converts between MongoDB documents and JSON
  payloads with `from_document`, `to_document`, `from_json` and `to_json`,
  raising `ValueError` on malformed input.
- `goodwave.api.PaginatedResponse` and `parse_page_param` give the page layout
  and query parsing used by `/api/surf-spots`.
- `goodwave.server.load_settings`, `goodwave.convert_ids.convert_ids` and
  `goodwave.import_data.import_records` expose the work of the commands.

## What it does not do

There is no authentication or authorisation on any endpoint, and no way to
delete a spot or edit fields other than `saved` through the API. The server is
Flask's built-in one; for production use, serve the application returned by
`create_app` from a WSGI server instead.