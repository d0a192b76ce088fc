"""In-memory list, set and sorted-set structures."""