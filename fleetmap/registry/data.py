# fleetmap/registry/data.py
# -*- coding: utf-8 -*-

"""
Built-in reference data: city pins and vehicle routes.

Raw dicts in the same shape accepted by `Registry.from_json`:
    cities: {"name", "lat", "lng", "deliveries"}
    routes: {"vehicle_id", "start", "end", "waypoints": [{"lat", "lng"}, ...]}
"""

from __future__ import annotations

CITY_PINS = [
      {"name": "Mumbai",      "lat": 19.0760, "lng": 72.8777, "deliveries": 25}
    , {"name": "Pune",        "lat": 18.5204, "lng": 73.8567, "deliveries": 18}
    , {"name": "Bengaluru",   "lat": 12.9716, "lng": 77.5946, "deliveries": 22}
    , {"name": "Mysuru",      "lat": 12.2958, "lng": 76.6394, "deliveries": 14}
    , {"name": "Chennai",     "lat": 13.0827, "lng": 80.2707, "deliveries": 20}
    , {"name": "Coimbatore",  "lat": 11.0168, "lng": 76.9558, "deliveries": 12}
    , {"name": "Kolkata",     "lat": 22.5726, "lng": 88.3639, "deliveries": 16}
    , {"name": "Delhi",       "lat": 28.6139, "lng": 77.2090, "deliveries": 28}
    , {"name": "Hyderabad",   "lat": 17.3850, "lng": 78.4867, "deliveries": 19}
    , {"name": "Ahmedabad",   "lat": 23.0225, "lng": 72.5714, "deliveries": 15}
    , {"name": "Jaipur",      "lat": 26.9124, "lng": 75.7873, "deliveries": 13}
    , {"name": "Lucknow",     "lat": 26.8467, "lng": 80.9462, "deliveries": 11}
    , {"name": "Bhopal",      "lat": 23.2599, "lng": 77.4126, "deliveries": 9}
    , {"name": "Kochi",       "lat": 9.9312,  "lng": 76.2673, "deliveries": 10}
    , {"name": "Patna",       "lat": 25.5941, "lng": 85.1376, "deliveries": 8}
    , {"name": "Bhubaneswar", "lat": 20.2961, "lng": 85.8245, "deliveries": 7}
    , {"name": "Chandigarh",  "lat": 30.7333, "lng": 76.7794, "deliveries": 12}
    , {"name": "Gurgaon",     "lat": 28.4595, "lng": 77.0266, "deliveries": 17}
    , {"name": "Dehradun",    "lat": 30.3165, "lng": 78.0322, "deliveries": 6}
    , {"name": "Thane",       "lat": 19.2183, "lng": 72.9781, "deliveries": 14}
]


def _route(vehicle_id: str, start: str, end: str, *waypoints: tuple) -> dict:
    return {
          "vehicle_id": vehicle_id
        , "start": start
        , "end": end
        , "waypoints": [{"lat": lat, "lng": lng} for lat, lng in waypoints]
    }


CITY_ROUTES = [
      _route("MH12AB1234", "Pune",        "Mumbai",     (18.6298, 73.7997))  # Lonavala
    , _route("MH12AB2234", "Mumbai",      "Pune",       (19.1334, 72.9133))  # Thane
    , _route("KA01CD1234", "Bengaluru",   "Mysuru",     (12.5266, 76.8945))  # Mandya
    , _route("TN09EF1234", "Chennai",     "Coimbatore", (12.9165, 79.1325))  # Vellore
    , _route("WB12GH3234", "Kolkata",     "Patna",      (22.6658, 88.0852))  # Serampore
    , _route("DL03IJ5678", "Delhi",       "Jaipur",     (28.4595, 77.0266))  # Gurgaon
    , _route("GJ05KL9012", "Ahmedabad",   "Mumbai",     (22.3072, 73.1812))  # Vadodara
    , _route("MH14MN3456", "Mumbai",      "Pune",       (19.2183, 72.9781))  # Thane
    , _route("KA02OP7890", "Mysuru",      "Bengaluru",  (12.2958, 76.6394))  # Mysuru
    , _route("TN10QR1234", "Coimbatore",  "Chennai",    (11.3410, 77.7172))  # Salem
    , _route("UP16ST5678", "Lucknow",     "Delhi",      (26.4499, 80.3319))  # Kanpur
    , _route("RJ14UV9012", "Jaipur",      "Delhi",      (27.5706, 76.6118))  # Alwar
    , _route("MP09WX3456", "Bhopal",      "Delhi",      (25.4484, 78.5685))  # Jhansi
    , _route("AP07YZ7890", "Hyderabad",   "Chennai",    (16.5062, 80.6480))  # Vijayawada
    , _route("KL08AB1234", "Kochi",       "Chennai",    (8.5241, 76.9366))   # Thiruvananthapuram
    , _route("BR01CD5678", "Patna",       "Kolkata",    (24.7955, 85.0000))  # Gaya
    , _route("OR02EF9012", "Bhubaneswar", "Kolkata",    (20.9517, 85.0985))  # Cuttack
    , _route("PB03GH3456", "Chandigarh",  "Delhi",      (31.6340, 74.8723))  # Amritsar
    , _route("HR04IJ7890", "Gurgaon",     "Delhi",      (28.4089, 77.3178))  # Faridabad
    , _route("UK05KL1234", "Dehradun",    "Delhi",      (29.9457, 78.1642))  # Haridwar
]
