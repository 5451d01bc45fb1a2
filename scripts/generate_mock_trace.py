import numpy as np
import pandas as pd

from common.geo import GeoPoint, haversine_m


def generate_mock_trace(num_fixes=180, interval_s=2.0, speed_mps=8.0, stop_every=45, stop_length=15,
                        output_file="mock_trace.csv", seed=None):
    """
    Generates a GPS trace for replaying through a navigation session.
    The device drives roughly north-east from the start point with GPS noise
    and periodic stops, so the refresh loop sees both real movement and
    stationary jitter that should NOT trigger new route requests.
    """
    rng = np.random.default_rng(seed)

    # Start around New Delhi (the original map default centre)
    START_LAT = 28.6139
    START_LON = 77.2090
    METERS_PER_DEG_LAT = 111_320.0
    meters_per_deg_lon = METERS_PER_DEG_LAT * np.cos(np.radians(START_LAT))

    heading = np.radians(35.0)
    lat, lon = START_LAT, START_LON
    rows = []

    for fix_index in range(num_fixes):
        # stop phase: no movement, only noise
        stopped = stop_every and (fix_index % stop_every) >= stop_every - stop_length
        if not stopped:
            heading += rng.normal(0.0, 0.05)
            step = speed_mps * interval_s
            lat += step * np.cos(heading) / METERS_PER_DEG_LAT
            lon += step * np.sin(heading) / meters_per_deg_lon

        # ~4 m of GPS jitter
        noise_lat = rng.normal(0.0, 4.0) / METERS_PER_DEG_LAT
        noise_lon = rng.normal(0.0, 4.0) / meters_per_deg_lon

        rows.append({
            "t": round(fix_index * interval_s, 3),
            "lat": np.round(lat + noise_lat, 7),
            "lon": np.round(lon + noise_lon, 7),
            "accuracy": np.round(rng.uniform(3.0, 12.0), 1),
        })

    df = pd.DataFrame(rows)
    df.to_csv(output_file, index=False)

    start = GeoPoint(df["lat"].iloc[0], df["lon"].iloc[0])
    end = GeoPoint(df["lat"].iloc[-1], df["lon"].iloc[-1])
    print(f"Generated {num_fixes} fixes over {df['t'].iloc[-1]:.0f}s into '{output_file}'")
    print(f"Straight-line start -> end: {haversine_m(start, end):.0f} m")
    return df


if __name__ == "__main__":
    generate_mock_trace(seed=7)
