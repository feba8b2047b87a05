# sensors.py
# Background-thread sensor services feeding the sketch:
#   MicMonitor  — rolling RMS mic level via sounddevice   → is_available / get_level
#   FaceTracker — OpenCV Haar face box → estimated keypoints mapped to canvas
#                                                         → get_keypoint(index)
# Both degrade gracefully: no library / no device → service reports nothing.
# =============================================================================

import collections
import threading
import time
from typing import Optional, Tuple

import numpy as np

# Optional heavy deps — imported with graceful fallback
try:
    import cv2
    _CV2_OK = True
except ImportError:
    _CV2_OK = False
    print("[WARN] opencv-python not found — face tracking disabled")

try:
    import sounddevice as sd
    sd.query_devices()          # raises if PortAudio missing
    _SD_OK = True
except Exception:
    _SD_OK = False

# ---------------------------------------------------------------------------
# 1. CONSTANTS
# ---------------------------------------------------------------------------
CAM_INDEX              = 0        # cv2 camera index (0 = default laptop cam)
CAM_FRAME_W            = 320      # capture resolution
CAM_FRAME_H            = 240
CAM_FPS                = 15       # camera poll rate (thread, independent of render)
CAM_ABSENT_TIMEOUT     = 0.5      # seconds without a face → keypoints go None

MIC_SAMPLE_RATE        = 16000    # Hz
MIC_CHUNK              = 512      # frames per chunk
MIC_HISTORY_SEC        = 0.1      # rolling RMS window

# Keypoints estimated from the face bounding box, as (fx, fy) fractions of it
FACE_KEYPOINTS = {
    0: (0.50, 0.50),    # face centre
    1: (0.50, 0.60),    # nose tip
    2: (0.50, 0.18),    # forehead
    3: (0.50, 0.98),    # chin
    4: (0.32, 0.40),    # left eye (viewer's left, before mirroring)
    5: (0.68, 0.40),    # right eye
}


def map_keypoint(px: float, py: float, frame_w: int, frame_h: int,
                 canvas_w: float, canvas_h: float,
                 mirror: bool = True) -> Tuple[float, float]:
    """
    Camera pixel → canvas pixel for a video drawn "fit height": scaled so the
    frame height fills the canvas, centred horizontally (edges may overflow).
    Mirror X so a selfie camera behaves like a mirror.
    """
    s  = canvas_h / frame_h
    ox = (canvas_w - frame_w * s) / 2.0
    x  = px * s + ox
    y  = py * s
    if mirror:
        x = canvas_w - x
    return (x, y)


def estimate_keypoints(box) -> dict:
    """Face box (x, y, w, h) in frame pixels → {index: (px, py)}."""
    x, y, w, h = box
    return {i: (x + fx * w, y + fy * h) for i, (fx, fy) in FACE_KEYPOINTS.items()}


# ---------------------------------------------------------------------------
# 2. FACE TRACKER  — runs OpenCV Haar in a background thread
# ---------------------------------------------------------------------------
class FaceTracker:
    """
    Background-thread face detector using cv2 Haar cascades.
    Zero external model files needed — uses bundled haarcascades.

    Outputs (thread-safe reads):
        get_keypoint(i)  — keypoint i in canvas space, or None without a face
        read_frame()     — latest camera frame (RGB, mirrored) for the backdrop
    """

    def __init__(self, canvas_w: float, canvas_h: float,
                 cam_index: int = CAM_INDEX, autostart: bool = True):
        self.canvas_w     = canvas_w
        self.canvas_h     = canvas_h
        self.cam_index    = cam_index
        self.face_present = False
        self.running      = False
        self.keep_frames  = True
        self._keypoints   = {}
        self._frame       = None
        self._lock        = threading.Lock()
        self._thread      = None
        self._cap         = None
        self._last_seen   = 0.0
        if autostart:
            self.start()

    def start(self):
        if not _CV2_OK:
            print("[FaceTracker] OpenCV not available — tracker disabled")
            return

        cascade_path = cv2.data.haarcascades + "haarcascade_frontalface_default.xml"
        self._cascade = cv2.CascadeClassifier(cascade_path)
        if self._cascade.empty():
            print("[FaceTracker] Haar cascade load failed — tracker disabled")
            return

        self._cap = cv2.VideoCapture(self.cam_index)
        if not self._cap.isOpened():
            print(f"[FaceTracker] Camera {self.cam_index} not accessible — tracker disabled")
            return

        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH,  CAM_FRAME_W)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, CAM_FRAME_H)
        self._cap.set(cv2.CAP_PROP_FPS,          CAM_FPS)
        self.running = True
        self._thread = threading.Thread(target=self._loop, daemon=True)
        self._thread.start()
        print(f"[FaceTracker] Camera {self.cam_index} opened  ({CAM_FRAME_W}×{CAM_FRAME_H})")

    def _loop(self):
        interval = 1.0 / CAM_FPS
        frame_w = None
        frame_h = None

        while self.running:
            t0 = time.perf_counter()
            ret, frame = self._cap.read()
            if not ret:
                time.sleep(interval)
                continue

            # Cameras may ignore CAP_PROP_*; use the real frame size
            fh, fw = frame.shape[:2]
            if frame_w is None:
                frame_w, frame_h = fw, fh
                print(f"[FaceTracker] Actual frame size: {frame_w}×{frame_h}")

            gray  = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
            gray  = cv2.equalizeHist(gray)
            faces = self._cascade.detectMultiScale(
                gray, scaleFactor=1.18, minNeighbors=4,
                minSize=(int(frame_w * 0.12), int(frame_h * 0.12)),
                flags=cv2.CASCADE_SCALE_IMAGE)

            rgb = None
            if self.keep_frames:
                rgb = np.ascontiguousarray(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)[:, ::-1])

            now = time.time()
            if len(faces) > 0:
                # Largest face = closest to the camera
                box = max(faces, key=lambda f: f[2]*f[3])
                mapped = {i: map_keypoint(px, py, frame_w, frame_h,
                                          self.canvas_w, self.canvas_h)
                          for i, (px, py) in estimate_keypoints(box).items()}
                with self._lock:
                    self._keypoints   = mapped
                    self.face_present = True
                    self._frame       = rgb
                self._last_seen = now
            else:
                with self._lock:
                    self._frame = rgb
                    if now - self._last_seen > CAM_ABSENT_TIMEOUT:
                        self._keypoints   = {}
                        self.face_present = False

            elapsed = time.perf_counter() - t0
            time.sleep(max(0.0, interval - elapsed))

    def get_keypoint(self, index: int) -> Optional[Tuple[float, float]]:
        with self._lock:
            return self._keypoints.get(index)

    def all_keypoints(self) -> dict:
        with self._lock:
            return dict(self._keypoints)

    def read_frame(self):
        with self._lock:
            return self._frame

    def stop(self):
        self.running = False
        if self._thread:
            self._thread.join(timeout=1.0)
        if self._cap is not None and self._cap.isOpened():
            self._cap.release()


# ---------------------------------------------------------------------------
# 3. MIC MONITOR  — rolling RMS audio level in a background thread
# ---------------------------------------------------------------------------
class MicMonitor:
    """
    Background-thread microphone RMS level monitor (sounddevice / PortAudio).
    Outputs (thread-safe reads):
        is_available()  — capture thread is delivering samples
        get_level()     — smoothed RMS level, 0…1
    """

    def __init__(self, device=None, autostart: bool = True):
        self.device     = device
        self.rms        = 0.0
        self.running    = False
        self._has_data  = False
        self._lock      = threading.Lock()
        self._thread    = None
        self._history   = collections.deque(maxlen=max(1, int(
                            MIC_SAMPLE_RATE / MIC_CHUNK * MIC_HISTORY_SEC)))
        if autostart:
            self.start()

    def start(self):
        if not _SD_OK:
            print("[MicMonitor] No audio backend available — mic monitoring disabled")
            return
        self.running = True
        self._thread = threading.Thread(target=self._loop, daemon=True)
        self._thread.start()
        print(f"[MicMonitor] Started with backend: sounddevice (device={self.device})")

    def _loop(self):
        chunk = MIC_CHUNK
        sr    = MIC_SAMPLE_RATE
        reported = False
        while self.running:
            try:
                data = sd.rec(chunk, samplerate=sr, channels=1, device=self.device,
                              dtype="float32", blocking=True)
            except Exception as exc:
                # one line per outage; keep retrying
                if not reported:
                    print(f"[MicMonitor] Capture error: {exc} — retrying")
                    reported = True
                time.sleep(0.1)
                continue
            reported = False
            self._push(float(np.sqrt(np.mean(data**2))))

    def _push(self, rms: float):
        """Push a new RMS sample and update the smoothed level."""
        self._history.append(rms)
        smooth_rms = float(np.mean(self._history))
        with self._lock:
            self.rms       = min(1.0, smooth_rms)
            self._has_data = True

    def is_available(self) -> bool:
        with self._lock:
            return self._has_data

    def get_level(self) -> float:
        with self._lock:
            return self.rms

    def stop(self):
        self.running = False
        if self._thread:
            self._thread.join(timeout=1.0)
